"""Feedback service: the operations exposed to the API and CLI."""
import json
import logging
from typing import List, Optional, Tuple, Union

from aggregation import compute_stats
from batch import BatchAnalyzer
from cache import (
    AGGREGATE_TTL_SECONDS,
    INSIGHTS_KEY,
    STATS_KEY,
    TTLCache,
    invalidate_aggregates,
)
from database import FeedbackStore
from errors import FeedbackNotFoundError, FeedbackValidationError
from insights import compute_insights
from label_extractor import LabelExtractor
from schemas import AggregatedStats, BatchResult, EmptyInsights, FeedbackEntry, Insights

logger = logging.getLogger(__name__)


class FeedbackService:
    """Cache-aware access to feedback, statistics and insights.

    Every write path drops both cached aggregates together.
    """

    def __init__(
        self,
        store: Optional[FeedbackStore] = None,
        cache: Optional[TTLCache] = None,
        extractor: Optional[LabelExtractor] = None
    ):
        self.store = store or FeedbackStore()
        self.cache = cache or TTLCache()
        self.extractor = extractor or LabelExtractor()
        self.batch_analyzer = BatchAnalyzer(self.store, self.extractor, self.cache)

    async def list_feedback(self, limit: int = 100) -> List[FeedbackEntry]:
        return await self.store.list_recent(limit)

    async def submit_feedback(self, source: Optional[str], text: Optional[str]) -> FeedbackEntry:
        """Store a new unanalyzed feedback entry.

        Raises:
            FeedbackValidationError: If source or text is blank
        """
        if not source or not source.strip() or not text or not text.strip():
            raise FeedbackValidationError("Missing required fields: source and text")

        entry = await self.store.insert(source.strip(), text.strip())
        invalidate_aggregates(self.cache)
        logger.info(f"Stored feedback {entry.id} from {entry.source}")
        return entry

    async def get_stats_payload(self) -> Tuple[str, bool]:
        """Serialized stats and whether they came from the cache."""
        cached = self.cache.get(STATS_KEY)
        if cached is not None:
            logger.info("Cache hit for stats")
            return cached, True

        logger.info("Cache miss for stats, recomputing")
        generation = self.cache.generation
        stats = await compute_stats(self.store)
        payload = stats.model_dump_json()
        self._put_if_current(STATS_KEY, payload, generation)
        return payload, False

    async def get_stats(self) -> AggregatedStats:
        payload, _ = await self.get_stats_payload()
        return AggregatedStats.model_validate_json(payload)

    async def analyze_one(self, feedback_id: int) -> FeedbackEntry:
        """Classify one entry and store its labels.

        Raises:
            FeedbackNotFoundError: If the id does not exist
        """
        entry = await self.store.get_by_id(feedback_id)
        if entry is None:
            raise FeedbackNotFoundError(feedback_id)

        labels = await self.extractor.classify(entry.text)
        updated = await self.store.update_labels(feedback_id, labels)
        if updated is None:
            raise FeedbackNotFoundError(feedback_id)

        invalidate_aggregates(self.cache)
        logger.info(f"Analyzed feedback {feedback_id}: {labels.sentiment}/{labels.urgency}")
        return updated

    async def analyze_all(self) -> BatchResult:
        return await self.batch_analyzer.analyze_all()

    async def get_insights_payload(self) -> Tuple[str, bool]:
        """Serialized insights (or the empty sentinel) and the cache flag."""
        cached = self.cache.get(INSIGHTS_KEY)
        if cached is not None:
            logger.info("Cache hit for insights")
            return cached, True

        logger.info("Cache miss for insights, recomputing")
        generation = self.cache.generation
        analyzed = await self.store.list_analyzed()
        insights = compute_insights(analyzed)
        payload = insights.model_dump_json(by_alias=True)
        self._put_if_current(INSIGHTS_KEY, payload, generation)
        return payload, False

    async def get_insights(self) -> Union[Insights, EmptyInsights]:
        payload, _ = await self.get_insights_payload()
        data = json.loads(payload)
        if "message" in data:
            return EmptyInsights.model_validate(data)
        return Insights.model_validate(data)

    def _put_if_current(self, key: str, payload: str, generation: int) -> None:
        """Cache a recomputed payload unless a write invalidated it meanwhile."""
        if self.cache.generation != generation:
            logger.info(f"Feedback changed while recomputing {key}, not caching")
            return
        self.cache.put(key, payload, AGGREGATE_TTL_SECONDS)
