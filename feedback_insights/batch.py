"""Batch analysis of unanalyzed feedback with bounded concurrency."""
import asyncio
import logging
from typing import Iterator, List, Sequence, TypeVar

from cache import TTLCache, invalidate_aggregates
from database import FeedbackStore
from label_extractor import Degraded, LabelExtractor
from schemas import BatchResult, FeedbackEntry, ItemResult

logger = logging.getLogger(__name__)

BATCH_LIMIT = 50
GROUP_SIZE = 5

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most size items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]


class BatchAnalyzer:
    """Labels every unanalyzed row, a fixed-size group at a time.

    Items inside a group are classified concurrently and groups run one
    after another, so at most GROUP_SIZE classification calls are in
    flight no matter how large the backlog is.
    """

    def __init__(
        self,
        store: FeedbackStore,
        extractor: LabelExtractor,
        cache: TTLCache,
        limit: int = BATCH_LIMIT,
        group_size: int = GROUP_SIZE
    ):
        self.store = store
        self.extractor = extractor
        self.cache = cache
        self.limit = limit
        self.group_size = group_size

    async def analyze_all(self) -> BatchResult:
        """Analyze up to `limit` unanalyzed rows and persist their labels.

        Returns:
            BatchResult with one ItemResult per selected row
        """
        pending = await self.store.list_unanalyzed(self.limit)

        if not pending:
            return BatchResult(message="No unanalyzed feedback found", analyzed=0, successful=0, failed=0)

        logger.info(f"Analyzing {len(pending)} feedback entries in groups of {self.group_size}")

        results: List[ItemResult] = []
        for number, group in enumerate(partition(pending, self.group_size), start=1):
            group_results = await asyncio.gather(*(self._analyze_item(entry) for entry in group))
            results.extend(group_results)
            logger.info(f"Group {number}: {sum(r.success for r in group_results)}/{len(group)} succeeded")

        invalidate_aggregates(self.cache)

        successful = sum(1 for r in results if r.success)
        return BatchResult(
            message="Analysis complete",
            analyzed=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results
        )

    async def _analyze_item(self, entry: FeedbackEntry) -> ItemResult:
        outcome = await self.extractor.classify_with_outcome(entry.text)
        labels = outcome.labels

        try:
            updated = await self.store.update_labels(entry.id, labels)
        except Exception as e:
            logger.error(f"Failed to store analysis for feedback {entry.id}: {e}")
            return ItemResult(id=entry.id, success=False, error=f"Failed to store analysis: {e}")

        if updated is None:
            return ItemResult(id=entry.id, success=False, error="Feedback no longer exists")

        # Degraded rows keep the default labels but count as failures
        degraded = isinstance(outcome, Degraded)
        return ItemResult(
            id=entry.id,
            success=not degraded,
            sentiment=labels.sentiment,
            themes=labels.themes,
            urgency=labels.urgency,
            error=outcome.reason if degraded else None
        )
