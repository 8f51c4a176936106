"""Pydantic schemas for request/response validation."""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from datetime import datetime


class FeedbackRequest(BaseModel):
    """Request schema for feedback submission.

    Both fields are optional here so missing or null values reach the
    service validation and produce the 400 response instead of a 422.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": "GitHub",
                "text": "The API response time is extremely slow, taking over 5 seconds to load."
            }
        }
    )

    source: Optional[str] = Field(None, description="Channel the feedback came from")
    text: Optional[str] = Field(None, description="Customer feedback text")


class FeedbackEntry(BaseModel):
    """One stored feedback observation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    source: str
    text: str
    sentiment: Optional[str] = None
    themes: Optional[str] = None
    urgency: Optional[str] = None
    created_at: datetime


class Labels(BaseModel):
    """Sentiment, themes and urgency assigned to one feedback entry."""

    sentiment: str
    themes: str
    urgency: str


class AggregatedStats(BaseModel):
    """Counts and recent urgent items across all feedback."""

    total: int
    by_source: Dict[str, int]
    by_sentiment: Dict[str, int]
    by_urgency: Dict[str, int]
    recent_urgent: List[FeedbackEntry]
    timestamp: datetime


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PriorityIssue(_CamelModel):
    id: int
    text: str
    source: str
    themes: Optional[str] = None
    created_at: datetime = Field(alias="created_at")


class FeatureRequest(_CamelModel):
    id: int
    text: str
    source: str
    sentiment: Optional[str] = None


class QuickWin(_CamelModel):
    id: int
    text: str
    themes: Optional[str] = None
    source: str


class PainPoint(_CamelModel):
    theme: str
    count: int
    severity: str


class ThemeCount(_CamelModel):
    theme: str
    count: int
    sentiment: str


class Insights(_CamelModel):
    """PM-facing insights derived from every analyzed feedback entry."""

    top_priority_issues: List[PriorityIssue]
    top_feature_requests: List[FeatureRequest]
    pain_points: List[PainPoint]
    quick_wins: List[QuickWin]
    sentiment_score: int = Field(..., ge=-100, le=100)
    action_items: List[str]
    theme_breakdown: List[ThemeCount]
    analyzed_count: int
    generated_at: datetime


class EmptyInsights(BaseModel):
    """Returned instead of Insights while nothing has been analyzed."""

    message: str = 'No analyzed feedback yet. Run "Analyze All Feedback" first.'


class ItemResult(BaseModel):
    """Outcome of analyzing one feedback entry inside a batch."""

    id: int
    success: bool
    sentiment: Optional[str] = None
    themes: Optional[str] = None
    urgency: Optional[str] = None
    error: Optional[str] = None


class BatchResult(BaseModel):
    """Summary of one analyze-all run."""

    message: str
    analyzed: int
    successful: int
    failed: int
    results: List[ItemResult] = Field(default_factory=list)
