# src/postproc/dedup.py — v1
"""Second cleaning pass: drop the part of a completion the user already typed."""

from __future__ import annotations

import re

from ollamacopilot.core.models import ClassificationResult

_LEADING_DECLARATION = re.compile(r"^\s*(?:const|let|var)\s+\w+\s*=\s*\{?\s*")
_INDENT = re.compile(r"^\s*")


def _is_word(char: str) -> bool:
    return char.isalnum() or char in "_$"


def _token_boundaries(text: str):
    """Start offsets of text that do not split a word, longest tail first."""
    for start, char in enumerate(text):
        if char.isspace():
            continue
        if start and _is_word(char) and _is_word(text[start - 1]):
            continue
        yield start


def remove_prefix_overlap(completion: str, line_prefix: str) -> str:
    """Strip a full echo of the prefix, else the longest echoed prefix tail."""
    if not line_prefix.strip():
        return completion

    body = completion.lstrip()
    # The first boundary is the whole typed text, so a full echo is tried first.
    for start in _token_boundaries(line_prefix):
        tail = line_prefix[start:]
        if body.startswith(tail):
            return body[len(tail):]
        stripped = tail.rstrip()
        if stripped != tail and body.startswith(stripped):
            return body[len(stripped):].lstrip(" \t")
    return completion


def get_unique_completion(
    completion: str,
    line_prefix: str,
    classification: ClassificationResult,
) -> str | None:
    """Return the insertable remainder of ``completion`` or None if nothing is left."""
    if not completion or not completion.strip():
        return None

    if classification.in_log_call or classification.in_string_literal:
        return completion

    if classification.in_object_literal:
        cleaned = _LEADING_DECLARATION.sub("", completion).strip()
        if not cleaned:
            return None
        typed = line_prefix.strip()
        indent = _INDENT.match(line_prefix).group(0)
        if typed.endswith(","):
            return f"\n{indent}{cleaned}"
        if typed.endswith("{"):
            return f"\n{indent}  {cleaned}"
        remainder = remove_prefix_overlap(cleaned, line_prefix)
        return remainder if remainder.strip() else None

    remainder = remove_prefix_overlap(completion, line_prefix)
    return remainder if remainder.strip() else None
