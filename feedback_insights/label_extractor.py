"""AI-powered label extraction for feedback text using OpenAI."""
import asyncio
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from openai import AsyncOpenAI

from config import config
from schemas import Labels

logger = logging.getLogger(__name__)

_LABEL_LINE = re.compile(r"^\s*(SENTIMENT|THEMES|URGENCY)\s*:", re.IGNORECASE | re.MULTILINE)
# The value must start with a vocabulary word; "[positive/negative/...]" is the
# format template echoed back, not an answer.
_SENTIMENT_LINE = re.compile(
    r"^\s*SENTIMENT\s*:\s*\[?\s*(positive|negative|neutral)\b(?!\s*[/|])",
    re.IGNORECASE | re.MULTILINE
)
_URGENCY_LINE = re.compile(
    r"^\s*URGENCY\s*:\s*\[?\s*(low|medium|high)\b(?!\s*[/|])",
    re.IGNORECASE | re.MULTILINE
)
_THEMES_LINE = re.compile(r"^\s*THEMES\s*:\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)

MAX_THEMES = 3


def default_labels() -> Labels:
    return Labels(
        sentiment=config.DEFAULT_SENTIMENT,
        themes=config.DEFAULT_THEMES,
        urgency=config.DEFAULT_URGENCY
    )


@dataclass(frozen=True)
class ParsedLabels:
    labels: Labels


@dataclass(frozen=True)
class Unparseable:
    reason: str


@dataclass(frozen=True)
class Ok:
    labels: Labels


@dataclass(frozen=True)
class Degraded:
    labels: Labels
    reason: str


ParseResult = Union[ParsedLabels, Unparseable]
Outcome = Union[Ok, Degraded]


def _clean(value: str) -> str:
    return value.strip().strip("[]\"'.").strip().lower()


def _known_themes(raw: str) -> List[str]:
    """Known theme tags in the order given, without duplicates."""
    tags: List[str] = []
    for tag in (_clean(part) for part in raw.split(",")):
        if tag in config.SUPPORTED_THEMES and tag not in tags:
            tags.append(tag)
    return tags


def _parse_themes(response_text: str) -> str:
    """Up to three tags from the first THEMES line that names any known tag.

    Lines containing "/" or ":" are the echoed format template.
    """
    for match in _THEMES_LINE.finditer(response_text):
        raw = match.group(1)
        if "/" in raw or ":" in raw:
            continue
        tags = _known_themes(raw)
        if tags:
            return ", ".join(tags[:MAX_THEMES])
    return config.DEFAULT_THEMES


def parse_labels(response_text: Optional[str]) -> ParseResult:
    """Parse the three label lines out of a model response.

    Each field is validated on its own; an invalid or missing field falls
    back to its default while the others keep their parsed values. Only a
    response with none of the label lines is unparseable.
    """
    if not response_text or not response_text.strip():
        return Unparseable("empty response")

    if not _LABEL_LINE.search(response_text):
        return Unparseable("no label lines in response")

    sentiment_match = _SENTIMENT_LINE.search(response_text)
    urgency_match = _URGENCY_LINE.search(response_text)

    return ParsedLabels(Labels(
        sentiment=sentiment_match.group(1).lower() if sentiment_match else config.DEFAULT_SENTIMENT,
        themes=_parse_themes(response_text),
        urgency=urgency_match.group(1).lower() if urgency_match else config.DEFAULT_URGENCY
    ))


class LabelExtractor:
    """Turns raw feedback text into sentiment, themes and urgency labels.

    classify() never raises: provider errors, timeouts and unreadable
    responses all come back as the default labels.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        """Initialize the extractor."""
        if client is None and config.OPENAI_API_KEY:
            client = AsyncOpenAI(api_key=config.OPENAI_API_KEY)
        self.client = client
        self.model = config.AI_MODEL
        self.timeout = config.AI_TIMEOUT_SECONDS
        self.enabled = config.AI_PROVIDER_ENABLED

    @property
    def available(self) -> bool:
        return self.enabled and self.client is not None

    def build_prompt(self, feedback_text: str) -> str:
        """Build the single combined prompt for all three labels."""
        themes_list = ", ".join(config.SUPPORTED_THEMES)

        return f"""Analyze this customer feedback and provide sentiment, themes, and urgency.

Feedback: "{feedback_text}"

Format your response EXACTLY as:
SENTIMENT: [positive/negative/neutral]
THEMES: [up to {MAX_THEMES} from: {themes_list}]
URGENCY: [low/medium/high]

Your analysis:"""

    async def _request_completion(self, prompt: str) -> str:
        """Send the prompt to the provider and return the raw reply text."""
        if not self.enabled:
            raise RuntimeError("AI provider disabled in config")
        if not self.client:
            raise RuntimeError("OpenAI client not configured")

        async with asyncio.timeout(self.timeout):
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": "You label customer feedback. Reply with the three labeled lines only."
                    },
                    {"role": "user", "content": prompt}
                ],
                temperature=0.2,
                max_tokens=60
            )

        return response.choices[0].message.content or ""

    async def classify_with_outcome(self, feedback_text: str) -> Outcome:
        """Classify feedback, reporting whether the defaults had to be used.

        Returns:
            Ok with parsed labels, or Degraded with the default labels and
            the reason the provider result could not be used
        """
        try:
            reply = await self._request_completion(self.build_prompt(feedback_text))
        except TimeoutError:
            reason = f"AI provider timeout after {self.timeout}s"
            logger.warning(f"Classification degraded: {reason}")
            return Degraded(default_labels(), reason)
        except Exception as e:
            reason = f"AI provider error: {e}"
            logger.warning(f"Classification degraded: {reason}")
            return Degraded(default_labels(), reason)

        parsed = parse_labels(reply)
        if isinstance(parsed, Unparseable):
            reason = f"Unparseable AI response: {parsed.reason}"
            logger.warning(f"Classification degraded: {reason}")
            return Degraded(default_labels(), reason)

        return Ok(parsed.labels)

    async def classify(self, feedback_text: str) -> Labels:
        """Classify feedback text; always returns a complete label triple."""
        outcome = await self.classify_with_outcome(feedback_text)
        return outcome.labels
