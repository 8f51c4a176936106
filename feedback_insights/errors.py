"""Errors surfaced to callers of the feedback service."""


class FeedbackValidationError(Exception):
    """Raised when a submission is missing its source or text."""

    pass


class FeedbackNotFoundError(Exception):
    """Raised when a feedback id does not exist."""

    def __init__(self, feedback_id: int):
        super().__init__(f"Feedback {feedback_id} not found")
        self.feedback_id = feedback_id
