# tests/unit/api/test_unit_api_models.py — v2
"""Tests for api/models.py."""

from __future__ import annotations

from ollamacopilot.api.models import CommandResult, CompletionItem
from ollamacopilot.core.models import Position


class TestCommandResult:
    def test_fields(self):
        result = CommandResult(success=False, message="Completion provider not initialized")
        assert not result.success
        assert "not initialized" in result.message


class TestCompletionItem:
    def test_position(self):
        item = CompletionItem(insert_text="a + b;", position=Position(3, 14))
        assert item.position.line == 3
        assert item.position.character == 14
