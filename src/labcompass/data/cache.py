"""
Cache Module - In-memory TTL cache owned by the data layer.
===========================================================

Department data and trending lists change slowly; they are cached for a
few minutes per client. The clock is injectable so expiry can be tested
without sleeping. Uses cachetools.TTLCache for expiry and LRU eviction.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from cachetools import TTLCache as _TTLCache

from labcompass.shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 300.0  # 5 minutes
DEFAULT_MAX_SIZE = 256


@dataclass
class CacheStats:
    """Hit/miss counters."""

    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class TTLCache:
    """
    Thread-safe key/value cache with time-based expiry.

    Args:
        ttl: Seconds an entry stays valid
        clock: Time source in seconds (defaults to time.monotonic)
        max_size: Maximum number of entries before LRU eviction

    Example:
        >>> cache = TTLCache(ttl=300)
        >>> cache.set("statistics", [])
        >>> cache.get("Statistics ")
        []
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        max_size: int = DEFAULT_MAX_SIZE,
    ):
        self.ttl = ttl
        self._cache: _TTLCache = _TTLCache(maxsize=max_size, ttl=ttl, timer=clock)
        self._lock = threading.Lock()
        self.stats = CacheStats()

    @staticmethod
    def _normalize_key(key: str) -> str:
        return key.lower().strip()

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None if absent or expired."""
        nkey = self._normalize_key(key)
        with self._lock:
            try:
                value = self._cache[nkey]
            except KeyError:
                self.stats.misses += 1
                return None
            self.stats.hits += 1
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[self._normalize_key(key)] = value

    def get_or_fetch(self, key: str, fetch: Callable[[], T]) -> T:
        """
        Cache-aside lookup.

        ``fetch`` runs outside the lock; concurrent misses may both fetch.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        value = fetch()
        self.set(key, value)
        return value

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._cache.pop(self._normalize_key(key), None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._normalize_key(key) in self._cache

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
