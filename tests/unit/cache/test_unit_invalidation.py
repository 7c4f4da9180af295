# tests/unit/cache/test_unit_invalidation.py — v2
"""Tests for cache/invalidation.py — reuse checks applied to cache hits."""

from __future__ import annotations

from unittest.mock import Mock

from ollamacopilot.cache.invalidation import should_invalidate
from ollamacopilot.cache.models import CacheEntry
from ollamacopilot.core.document import InMemoryDocument, TextDocument
from ollamacopilot.core.models import ClassificationResult, Position


def _entry(completion: str, line_prefix: str = "") -> CacheEntry:
    return CacheEntry(completion=completion, timestamp=0.0, line_prefix=line_prefix)


class TestShouldInvalidate:
    def test_valid_hit(self):
        doc, pos = InMemoryDocument.with_cursor("const x = |")
        assert not should_invalidate(_entry("5;", "const x = "), doc, pos, ClassificationResult())

    def test_volatile_context(self):
        doc, pos = InMemoryDocument.with_cursor("const x = |")
        cls = ClassificationResult(in_string_literal=True)
        assert should_invalidate(_entry("5;", "const x = "), doc, pos, cls)

    def test_prefix_diverged(self):
        doc, pos = InMemoryDocument.with_cursor("const y = |")
        assert should_invalidate(_entry("5;", "const x = "), doc, pos, ClassificationResult())

    def test_entry_without_prefix_is_not_compared(self):
        doc, pos = InMemoryDocument.with_cursor("const y = |")
        assert not should_invalidate(_entry("5;"), doc, pos, ClassificationResult())

    def test_completion_already_after_cursor(self):
        doc, pos = InMemoryDocument.with_cursor("const x = |5;")
        assert should_invalidate(_entry("5;\nfoo();", "const x = "), doc, pos, ClassificationResult())

    def test_reads_suffix_through_document_interface(self):
        doc = Mock(spec=TextDocument)
        doc.line_prefix.return_value = "const x = "
        doc.line_suffix.return_value = " 5;"
        pos = Position(3, 10)
        assert should_invalidate(_entry("5;", "const x = "), doc, pos, ClassificationResult())
        doc.line_suffix.assert_called_once_with(pos)
        doc.line_at.assert_not_called()
