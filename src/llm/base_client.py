# src/llm/base_client.py — v3
"""Abstract LLM client interface.

Adapters implement ``complete`` and ``stream_chunks``. Callers go through
``chat``, which returns either the full text or an abortable CompletionStream.
``cancel_call`` aborts one single-shot call; ``abort`` aborts every call still
active on this client.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable

from ollamacopilot.llm.models import LLMResponse, Message, ModelInfo, RequestAborted
from ollamacopilot.llm.streaming import CompletionStream

logger = logging.getLogger(__name__)


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    def __init__(self) -> None:
        self._active_tasks: set[asyncio.Future] = set()
        self._aborted_tasks: set[asyncio.Future] = set()
        self._active_streams: set[CompletionStream] = set()

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion."""

    @abstractmethod
    def stream_chunks(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> AsyncIterator[str]:
        """Incremental text fragments of a completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (ollama, ...)."""

    async def list_models(self) -> list[ModelInfo]:
        """Models available to this provider. Empty when the provider cannot list."""
        return []

    @property
    def active_calls(self) -> int:
        return len(self._active_tasks) + len(self._active_streams)

    async def chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        system: str | None = None,
        stream: bool = False,
        max_tokens: int = 256,
        temperature: float = 0.2,
        on_call: Callable[[asyncio.Future], None] | None = None,
    ) -> str | CompletionStream:
        """Send messages; return the text, or a CompletionStream when ``stream``.

        ``on_call`` receives the future of a single-shot call as soon as it is
        scheduled, so the caller can later pass it to ``cancel_call``.

        Raises:
            RequestAborted: If ``abort()`` or ``cancel_call()`` stopped the call
                while it was pending.
        """
        if stream:
            chunks = self.stream_chunks(
                messages, model=model, system=system,
                max_tokens=max_tokens, temperature=temperature,
            )
            completion_stream = CompletionStream(chunks, on_close=self._active_streams.discard)
            self._active_streams.add(completion_stream)
            return completion_stream

        task = asyncio.ensure_future(self.complete(
            messages, model=model, system=system,
            max_tokens=max_tokens, temperature=temperature,
        ))
        self._active_tasks.add(task)
        if on_call is not None:
            on_call(task)
        try:
            response = await task
        except asyncio.CancelledError:
            if task in self._aborted_tasks:
                raise RequestAborted("Model call aborted") from None
            raise
        finally:
            self._active_tasks.discard(task)
            self._aborted_tasks.discard(task)
        logger.debug(
            "%s completion: %d output tokens in %d ms",
            self.provider_name, response.output_tokens, response.latency_ms,
        )
        return response.content

    def cancel_call(self, call: asyncio.Future) -> None:
        """Abort one single-shot call started through ``chat``."""
        if call in self._active_tasks and not call.done():
            self._aborted_tasks.add(call)
            call.cancel()

    def abort(self) -> None:
        """Abort every in-flight call started through ``chat``."""
        for task in list(self._active_tasks):
            self.cancel_call(task)
        for completion_stream in list(self._active_streams):
            completion_stream.abort()
