# src/cache/completion_cache.py — v2
"""Bounded LRU completion cache with per-entry TTL.

In-memory only; entries do not survive a restart. get/set/evict run under one
lock so the cache stays consistent when the host calls it from several threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from ollamacopilot.cache.models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_TTL_SECONDS = 5 * 60


class CompletionCache:
    """LRU map of cache key → CacheEntry.

    Args:
        capacity: Maximum number of entries kept.
        ttl_seconds: Age after which an entry reads as absent.
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for key, refreshing its recency."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp > self._ttl:
                logger.debug("Cache entry expired: %s", key)
                return None
            self._entries.move_to_end(key)
            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        """Insert or overwrite key, evicting the least recently used entry."""
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted: %s", evicted)

    def put(self, key: str, completion: str, line_prefix: str = "") -> CacheEntry:
        """Store a completion stamped with the current clock reading."""
        entry = CacheEntry(completion=completion, timestamp=self._clock(), line_prefix=line_prefix)
        self.set(key, entry)
        return entry

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Completion cache cleared (%d entries)", count)

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
