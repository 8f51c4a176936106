"""Aggregate statistics over the feedback table."""
import asyncio
from datetime import datetime, UTC

from database import FeedbackStore
from schemas import AggregatedStats

RECENT_URGENT_LIMIT = 5


async def compute_stats(store: FeedbackStore) -> AggregatedStats:
    """Compute counts and recent urgent items from the current store contents.

    The five reads are independent and issued together.
    """
    total, by_source, by_sentiment, by_urgency, recent_urgent = await asyncio.gather(
        store.count_all(),
        store.count_grouped_by("source", exclude_null=False),
        store.count_grouped_by("sentiment"),
        store.count_grouped_by("urgency"),
        store.list_by_urgency("high", limit=RECENT_URGENT_LIMIT),
    )

    return AggregatedStats(
        total=total,
        by_source=by_source,
        by_sentiment=by_sentiment,
        by_urgency=by_urgency,
        recent_urgent=recent_urgent,
        timestamp=datetime.now(UTC)
    )
