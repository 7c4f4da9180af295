# tests/unit/llm/test_unit_llm_models.py — v1
"""Tests for llm/models.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ollamacopilot.llm.models import LLMResponse, Message, ModelInfo, RequestAborted


class TestMessage:
    def test_valid_roles(self):
        for role in ("user", "assistant", "system"):
            assert Message(role=role, content="x").role == role

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="x")


class TestLLMResponse:
    def test_defaults(self):
        resp = LLMResponse(content="ok", model="m", provider="ollama")
        assert resp.input_tokens == 0
        assert resp.output_tokens == 0
        assert resp.latency_ms == 0
        assert resp.raw_response is None


class TestModelInfo:
    def test_details_optional(self):
        assert ModelInfo(name="llama3:8b").details == ""


class TestRequestAborted:
    def test_is_plain_exception(self):
        assert issubclass(RequestAborted, Exception)
        assert not issubclass(RequestAborted, ValueError)
