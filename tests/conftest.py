# tests/conftest.py — v2
"""Shared test fixtures for unit tests.

Provides in-memory documents with a cursor marker, a scripted fake LLM client
and settings isolated from any local .env file. No network I/O.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable

import pytest

from ollamacopilot.config.settings import Settings
from ollamacopilot.core.document import InMemoryDocument
from ollamacopilot.core.models import Position
from ollamacopilot.llm.base_client import BaseLLMClient
from ollamacopilot.llm.models import LLMResponse, Message


# === Fake LLM client ===


class FakeLLMClient(BaseLLMClient):
    """Scripted client: returns ``responses`` in order, repeating the last one.

    Set ``gate`` to an asyncio.Event to hold every call until it is set;
    ``started`` is set as soon as a call begins. ``error`` is raised instead
    of answering.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        chunk_size: int = 4,
        error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.responses = list(responses or ["return 42;"])
        self.chunk_size = chunk_size
        self.error = error
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.calls: list[dict[str, object]] = []

    def _begin(self, messages, model, system, max_tokens, temperature) -> str:
        self.calls.append({
            "messages": messages,
            "model": model,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        self.started.set()
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    async def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        text = self._begin(messages, model, system, max_tokens, temperature)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return LLMResponse(content=text, model=model or "", provider="fake", output_tokens=len(text))

    async def stream_chunks(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> AsyncIterator[str]:
        text = self._begin(messages, model, system, max_tokens, temperature)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        for i in range(0, len(text), self.chunk_size):
            yield text[i:i + self.chunk_size]

    @property
    def provider_name(self) -> str:
        return "fake"


class RecordingNotifier:
    """Notifier that keeps every message."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


# === FIXTURES: Documents ===


@pytest.fixture
def make_document() -> Callable[..., tuple[InMemoryDocument, Position]]:
    """Factory: text with a single ``|`` cursor marker → (document, position)."""

    def _make(
        text: str, file_name: str = "app.ts", language_id: str | None = None,
    ) -> tuple[InMemoryDocument, Position]:
        return InMemoryDocument.with_cursor(text, file_name=file_name, language_id=language_id)

    return _make


# === FIXTURES: Settings ===


@pytest.fixture
def settings() -> Settings:
    """Settings with a model selected, no debounce and no .env lookup."""
    return Settings(
        _env_file=None,
        ollama_default_model="test-model",
        completion_debounce_ms=0,
    )


# === FIXTURES: Fake LLM ===


@pytest.fixture
def fake_llm_factory() -> Callable[..., FakeLLMClient]:
    return FakeLLMClient


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
