# src/completion/request.py — v2
"""Handle on the single live completion request: debounce wait plus model call."""

from __future__ import annotations

import asyncio

from ollamacopilot.llm.base_client import BaseLLMClient
from ollamacopilot.llm.streaming import CompletionStream


class InFlightRequest:
    """One logical completion request, identified by its generation number.

    ``cancel()`` wakes a pending debounce wait and aborts the model call this
    request started, and nothing else running on the same client. It is
    idempotent and may be called from any coroutine.
    """

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self._cancelled = asyncio.Event()
        self._stream: CompletionStream | None = None
        self._client: BaseLLMClient | None = None
        self._call: asyncio.Future | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def attach_call(self, client: BaseLLMClient, call: asyncio.Future) -> None:
        self._client = client
        self._call = call
        if self.cancelled:
            client.cancel_call(call)

    def attach_stream(self, stream: CompletionStream) -> None:
        self._stream = stream
        if self.cancelled:
            stream.abort()

    def cancel(self) -> None:
        if self.cancelled:
            return
        self._cancelled.set()
        if self._stream is not None:
            self._stream.abort()
        elif self._client is not None and self._call is not None:
            self._client.cancel_call(self._call)

    async def wait_debounce(self, delay: float) -> bool:
        """Wait ``delay`` seconds; False if the request was cancelled meanwhile."""
        if self.cancelled:
            return False
        if delay <= 0:
            return True
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return True
        return False

    def __repr__(self) -> str:
        return f"InFlightRequest(generation={self.generation}, cancelled={self.cancelled})"
