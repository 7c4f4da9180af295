# src/llm/streaming.py — v1
"""Abortable stream of completion fragments.

A CompletionStream wraps the async iterator produced by an adapter. Its
``abort()`` may be called from any coroutine other than the consumer: the
pending read is cancelled and the consumer sees RequestAborted.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable

from ollamacopilot.llm.models import RequestAborted

logger = logging.getLogger(__name__)

_END = object()


class CompletionStream:
    """Async iterator of text fragments with an external abort handle."""

    def __init__(
        self,
        chunks: AsyncIterator[str],
        on_close: Callable[[CompletionStream], None] | None = None,
    ) -> None:
        self._chunks = chunks
        self._on_close = on_close
        self._pending: asyncio.Future | None = None
        self._aborted = False
        self._closed = False

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def closed(self) -> bool:
        return self._closed

    def abort(self) -> None:
        """Stop the stream; the consumer's next (or current) read raises RequestAborted."""
        if self._aborted:
            return
        self._aborted = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._finish()

    def __aiter__(self) -> CompletionStream:
        return self

    async def __anext__(self) -> str:
        if self._aborted:
            raise RequestAborted("Stream aborted")
        if self._closed:
            raise StopAsyncIteration

        self._pending = asyncio.ensure_future(self._read())
        try:
            chunk = await self._pending
        except asyncio.CancelledError:
            if self._aborted:
                raise RequestAborted("Stream aborted") from None
            raise
        except Exception:
            self._finish()
            raise
        finally:
            self._pending = None

        if chunk is _END:
            self._finish()
            raise StopAsyncIteration
        return chunk

    async def _read(self) -> object:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            return _END

    async def collect(self) -> str:
        """Concatenate every fragment; raises RequestAborted if aborted meanwhile."""
        parts: list[str] = []
        async for chunk in self:
            parts.append(chunk)
        return "".join(parts)

    async def aclose(self) -> None:
        self._finish()
        closer = getattr(self._chunks, "aclose", None)
        if closer is not None:
            await closer()

    def _finish(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._on_close is not None:
            self._on_close(self)
