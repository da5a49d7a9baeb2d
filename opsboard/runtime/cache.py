"""
In-memory memoization of rule evaluations.

Evaluation is a pure function of (rule set version, context, baseline), so
results can be reused across re-renders and repeated projections.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opsboard.rules.engine import RuleEvaluation

CacheKey = tuple[str, Hashable, Hashable]


class EvaluationCache:
    """Thread-safe in-memory cache for RuleEvaluation objects."""

    def __init__(self, max_size: int = 1024):
        """Initialize the cache.

        Args:
            max_size: Maximum number of evaluations to keep
        """
        self._cache: dict[CacheKey, RuleEvaluation] = {}
        self._max_size = max(1, max_size)
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: CacheKey) -> RuleEvaluation | None:
        """Get a cached evaluation.

        Args:
            key: (rule set version, context fingerprint, baseline) tuple

        Returns:
            RuleEvaluation if cached, None otherwise
        """
        with self._lock:
            if key in self._cache:
                self._hits += 1
                return self._cache[key]
            self._misses += 1
            return None

    def put(self, key: CacheKey, evaluation: RuleEvaluation) -> None:
        with self._lock:
            # Simple eviction: clear half when full
            if key not in self._cache and len(self._cache) >= self._max_size:
                self._evict()
            self._cache[key] = evaluation

    def invalidate_version(self, version: str) -> int:
        """Drop every evaluation computed against a rule set version.

        Returns:
            Number of entries removed
        """
        with self._lock:
            stale = [key for key in self._cache if key[0] == version]
            for key in stale:
                del self._cache[key]
            return len(stale)

    def invalidate_all(self) -> int:
        """Invalidate all cached evaluations.

        Returns:
            Number of entries invalidated
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            return count

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = self._hits / total if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": hit_rate,
            }

    def _evict(self) -> None:
        """Evict the oldest half of the cached entries (FIFO)."""
        keys = list(self._cache.keys())
        evict_count = max(1, len(keys) // 2)
        for key in keys[:evict_count]:
            del self._cache[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


# Global cache instance
_global_cache: EvaluationCache | None = None


def get_evaluation_cache() -> EvaluationCache:
    """Get or create the global evaluation cache."""
    global _global_cache
    if _global_cache is None:
        from opsboard.core.config import get_settings

        _global_cache = EvaluationCache(max_size=get_settings().cache_max_size)
    return _global_cache


def reset_evaluation_cache() -> None:
    """Reset the global evaluation cache."""
    global _global_cache
    _global_cache = None
