# src/cache/invalidation.py — v2
"""Second-chance check applied to a cache hit before it is reused.

The cache key already covers the surrounding window, cursor coordinates and
the enclosing object's properties. This check only catches drift the key does
not capture. An invalidated entry is ignored for this request, not evicted.
"""

from __future__ import annotations

import logging

from ollamacopilot.cache.models import CacheEntry
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import ClassificationResult, Position

logger = logging.getLogger(__name__)


def should_invalidate(
    entry: CacheEntry,
    document: TextDocument,
    position: Position,
    classification: ClassificationResult,
) -> bool:
    """Whether the stored completion is unsafe to reuse at this cursor."""
    if classification.is_volatile:
        logger.debug("Invalidating hit: volatile context")
        return True

    prefix = document.line_prefix(position)
    if entry.line_prefix and entry.line_prefix != prefix:
        logger.debug("Invalidating hit: line prefix diverged")
        return True

    completion = entry.completion.strip()
    suffix = document.line_suffix(position).strip()
    if completion and suffix and suffix.startswith(completion.split("\n", 1)[0]):
        logger.debug("Invalidating hit: completion already present after cursor")
        return True

    return False
