"""PM-facing insights derived from analyzed feedback."""
from datetime import datetime, UTC
from typing import Dict, List, Optional, Sequence, Union

from schemas import (
    EmptyInsights,
    FeatureRequest,
    FeedbackEntry,
    Insights,
    PainPoint,
    PriorityIssue,
    QuickWin,
    ThemeCount,
)

PREVIEW_LENGTH = 100
SENTIMENT_SCORES = {"positive": 1, "neutral": 0, "negative": -1}


def split_themes(themes: Optional[str]) -> List[str]:
    """Split a comma-joined themes field into trimmed, non-empty tags."""
    if not themes:
        return []
    return [tag.strip() for tag in themes.split(",") if tag.strip()]


def has_theme(entry: FeedbackEntry, theme: str) -> bool:
    return theme in split_themes(entry.themes)


def preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..."


def get_pain_points(feedback: Sequence[FeedbackEntry], limit: int = 5) -> List[PainPoint]:
    """Group negative feedback by theme.

    A theme is high severity when more than half of its occurrences are
    high urgency.
    """
    themes: Dict[str, Dict[str, int]] = {}

    for entry in feedback:
        if entry.sentiment != "negative":
            continue
        for theme in split_themes(entry.themes):
            data = themes.setdefault(theme, {"count": 0, "high": 0})
            data["count"] += 1
            if entry.urgency == "high":
                data["high"] += 1

    points = [
        PainPoint(
            theme=theme,
            count=data["count"],
            severity="high" if data["high"] > data["count"] / 2 else "medium"
        )
        for theme, data in themes.items()
    ]
    points.sort(key=lambda p: p.count, reverse=True)
    return points[:limit]


def calculate_sentiment_score(feedback: Sequence[FeedbackEntry]) -> int:
    """Average sentiment scaled to [-100, 100], halves rounded up."""
    if not feedback:
        return 0
    total = sum(SENTIMENT_SCORES.get(entry.sentiment, 0) for entry in feedback)
    n = len(feedback)
    # floor(100 * total / n + 0.5) in integer arithmetic
    return (200 * total + n) // (2 * n)


def generate_action_items(feedback: Sequence[FeedbackEntry]) -> List[str]:
    """Recommendations from fixed threshold rules, always in this order."""
    items: List[str] = []

    high_urgency = sum(1 for f in feedback if f.urgency == "high")
    if high_urgency > 0:
        items.append(f"🚨 {high_urgency} high-urgency items need immediate attention")

    bugs = sum(1 for f in feedback if has_theme(f, "bug"))
    if bugs > 5:
        items.append(f"🐛 {bugs} bug reports - consider allocating sprint capacity for stability work")

    feature_requests = sum(1 for f in feedback if has_theme(f, "feature-request"))
    if feature_requests > 3:
        items.append(
            f"💡 {feature_requests} feature requests - prioritize by customer impact and engineering effort"
        )

    negative = sum(1 for f in feedback if f.sentiment == "negative")
    non_negative_ratio = (len(feedback) - negative) / len(feedback) if feedback else 1.0
    if non_negative_ratio < 0.5:
        items.append(
            "📉 Customer sentiment is trending negative - schedule customer interviews to understand root causes"
        )

    performance = sum(1 for f in feedback if has_theme(f, "performance"))
    if performance > 2:
        items.append(f"⚡ {performance} performance complaints - run performance audit and set optimization goals")

    documentation = sum(1 for f in feedback if has_theme(f, "documentation"))
    if documentation > 2:
        items.append(f"📚 {documentation} docs gaps identified - update documentation and consider tutorial videos")

    if not items:
        items.append("✅ No critical issues detected - focus on feature development and user growth")

    return items


def get_theme_breakdown(feedback: Sequence[FeedbackEntry], limit: int = 10) -> List[ThemeCount]:
    """Theme frequency over all analyzed feedback.

    A theme is labeled negative when more than half of its occurrences
    come from negative feedback.
    """
    themes: Dict[str, Dict[str, int]] = {}

    for entry in feedback:
        for theme in split_themes(entry.themes):
            data = themes.setdefault(theme, {"count": 0, "negative": 0})
            data["count"] += 1
            if entry.sentiment == "negative":
                data["negative"] += 1

    breakdown = [
        ThemeCount(
            theme=theme,
            count=data["count"],
            sentiment="negative" if data["negative"] > data["count"] / 2 else "positive"
        )
        for theme, data in themes.items()
    ]
    breakdown.sort(key=lambda t: t.count, reverse=True)
    return breakdown[:limit]


def compute_insights(feedback: Sequence[FeedbackEntry]) -> Union[Insights, EmptyInsights]:
    """Derive all insights from analyzed feedback ordered newest first.

    Args:
        feedback: Every analyzed entry (sentiment set)

    Returns:
        Insights, or EmptyInsights when nothing has been analyzed yet
    """
    if not feedback:
        return EmptyInsights()

    priority = [f for f in feedback if f.urgency == "high" and f.sentiment == "negative"][:5]
    feature_requests = [f for f in feedback if has_theme(f, "feature-request")][:5]
    positives = [f for f in feedback if f.sentiment == "positive"][:3]

    return Insights(
        top_priority_issues=[
            PriorityIssue(
                id=f.id,
                text=preview(f.text),
                source=f.source,
                themes=f.themes,
                created_at=f.created_at
            )
            for f in priority
        ],
        top_feature_requests=[
            FeatureRequest(id=f.id, text=preview(f.text), source=f.source, sentiment=f.sentiment)
            for f in feature_requests
        ],
        pain_points=get_pain_points(feedback),
        quick_wins=[
            QuickWin(id=f.id, text=preview(f.text), themes=f.themes, source=f.source)
            for f in positives
        ],
        sentiment_score=calculate_sentiment_score(feedback),
        action_items=generate_action_items(feedback),
        theme_breakdown=get_theme_breakdown(feedback),
        analyzed_count=len(feedback),
        generated_at=datetime.now(UTC)
    )
