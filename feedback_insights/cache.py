"""TTL cache for derived aggregate payloads."""
import logging
import time
from typing import Any, Callable, Dict, Optional
from collections import OrderedDict
from config import config

logger = logging.getLogger(__name__)

STATS_KEY = "stats"
INSIGHTS_KEY = "insights"
AGGREGATE_TTL_SECONDS = 300


class TTLCache:
    """String-keyed LRU cache where every entry carries its own expiry.

    Values are stored as the serialized payload so a hit returns exactly
    the bytes produced on the miss that populated it.
    """

    def __init__(self, max_size: int = None, clock: Callable[[], float] = time.time):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries (default from config)
            clock: Time source in seconds, replaceable in tests
        """
        self.max_size = max_size or config.CACHE_MAX_SIZE
        self._clock = clock
        self._cache: OrderedDict[str, Dict[str, Any]] = OrderedDict()
        self._stats = {"hits": 0, "misses": 0}
        # Bumped on every aggregate invalidation
        self.generation = 0

    def get(self, key: str) -> Optional[str]:
        """Retrieve a cached value if present and not expired.

        Returns:
            The stored payload, or None on a miss
        """
        if key not in self._cache:
            self._stats["misses"] += 1
            return None

        entry = self._cache[key]

        if self._clock() >= entry["expires_at"]:
            del self._cache[key]
            self._stats["misses"] += 1
            return None

        self._cache.move_to_end(key)
        self._stats["hits"] += 1

        return entry["value"]

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a payload that expires after ttl_seconds."""
        if len(self._cache) >= self.max_size and key not in self._cache:
            self._cache.popitem(last=False)

        self._cache[key] = {
            "value": value,
            "expires_at": self._clock() + ttl_seconds
        }
        self._cache.move_to_end(key)

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, size, and hit rate
        """
        total_requests = self._stats["hits"] + self._stats["misses"]
        hit_rate = (
            self._stats["hits"] / total_requests if total_requests > 0 else 0
        )

        return {
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "size": len(self._cache),
            "max_size": self.max_size,
            "hit_rate": round(hit_rate, 3)
        }


def invalidate_aggregates(cache: TTLCache) -> None:
    """Drop both derived payloads; they are functions of the whole table.

    The generation bump lets a recompute that started before this call
    know its result is already stale.
    """
    cache.delete(STATS_KEY)
    cache.delete(INSIGHTS_KEY)
    cache.generation += 1
    logger.info("Invalidated cached stats and insights")
