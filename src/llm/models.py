# src/llm/models.py — v2
"""LLM-specific types: Message, LLMResponse, ModelInfo, RequestAborted."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class RequestAborted(Exception):
    """Raised when a model call is aborted before it produced a result.

    Cancellation is an expected outcome, never an error to report.
    """


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from an LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    raw_response: Any = None


class ModelInfo(BaseModel):
    """A locally available model, as listed by the provider."""

    name: str
    details: str = ""
