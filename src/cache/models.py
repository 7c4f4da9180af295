# src/cache/models.py — v2
"""Cache domain models: CacheEntry."""

from __future__ import annotations

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Cleaned completion stored for a cache key.

    ``timestamp`` is read from the cache clock (monotonic seconds).
    ``line_prefix`` is the text before the cursor when the completion was
    generated; the invalidation check compares against it.
    """

    completion: str
    timestamp: float
    line_prefix: str = ""
