# src/cache/fingerprint.py — v3
"""Cache key derivation from the editing context around the cursor.

The key concatenates, in order:
  1. a hash of the bounded window of lines before the cursor plus the prefix
  2. the variable name inferred from the prefix
  3. the object-literal flag
  4. line and column
  5. property names already present in the enclosing object
  6. a short fingerprint of the cursor neighbourhood

Identical inputs give identical keys; any differing component changes the key.
"""

from __future__ import annotations

import hashlib

from ollamacopilot.context.helpers import extract_variable_name, get_existing_properties
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import ClassificationResult, Position

DEFAULT_HASH_WINDOW = 10
_NEIGHBOURHOOD_CHARS = 16


def _short_hash(text: str, length: int = 16) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]


def context_hash(
    document: TextDocument, position: Position, window: int = DEFAULT_HASH_WINDOW,
) -> str:
    """Fingerprint of the lines before the cursor and the current line prefix."""
    start = max(0, position.line - window)
    lines = [document.line_at(i) for i in range(start, position.line)]
    lines.append(document.line_prefix(position))
    return _short_hash("\n".join(lines))


def cursor_fingerprint(document: TextDocument, position: Position) -> str:
    """Short hash of the prefix tail and the character right after the cursor."""
    prefix = document.line_prefix(position)
    following = document.line_at(position.line)[position.character: position.character + 1]
    return _short_hash(f"{prefix[-_NEIGHBOURHOOD_CHARS:]}\x00{following}", length=8)


def build_cache_key(
    document: TextDocument,
    position: Position,
    classification: ClassificationResult,
    window: int = DEFAULT_HASH_WINDOW,
) -> str:
    """Derive the cache key for a non-volatile request.

    Raises:
        ValueError: If the classification is volatile; those requests must
            never be looked up or stored.
    """
    if classification.is_volatile:
        raise ValueError("Cache keys are not derived for volatile contexts")

    prefix = document.line_prefix(position)
    var_name = extract_variable_name(prefix) or ""
    existing = ",".join(get_existing_properties(document, position))
    return ":".join((
        context_hash(document, position, window),
        var_name,
        str(classification.in_object_literal).lower(),
        str(position.line),
        str(position.character),
        existing,
        cursor_fingerprint(document, position),
    ))
