# tests/unit/llm/test_unit_streaming.py — v1
"""Tests for llm/streaming.py — CompletionStream reading, closing and abort."""

from __future__ import annotations

import asyncio

import pytest

from ollamacopilot.llm.models import RequestAborted
from ollamacopilot.llm.streaming import CompletionStream


async def _chunks(*parts: str):
    for part in parts:
        yield part


async def _blocking(started: asyncio.Event, release: asyncio.Event):
    yield "first"
    started.set()
    await release.wait()
    yield "never"


class TestReading:
    @pytest.mark.asyncio
    async def test_collect_concatenates(self):
        stream = CompletionStream(_chunks("ret", "urn ", "42;"))
        assert await stream.collect() == "return 42;"
        assert stream.closed
        assert not stream.aborted

    @pytest.mark.asyncio
    async def test_iterates_fragments(self):
        stream = CompletionStream(_chunks("a", "b"))
        assert [c async for c in stream] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_on_close_called_once(self):
        closed = []
        stream = CompletionStream(_chunks("a"), on_close=closed.append)
        await stream.collect()
        await stream.aclose()
        stream.abort()
        assert closed == [stream]

    @pytest.mark.asyncio
    async def test_error_propagates_and_closes(self):
        async def failing():
            yield "a"
            raise ConnectionError("lost")

        stream = CompletionStream(failing())
        with pytest.raises(ConnectionError):
            await stream.collect()
        assert stream.closed


class TestAbort:
    @pytest.mark.asyncio
    async def test_abort_before_read(self):
        stream = CompletionStream(_chunks("a"))
        stream.abort()
        with pytest.raises(RequestAborted):
            await stream.collect()

    @pytest.mark.asyncio
    async def test_abort_mid_read(self):
        started, release = asyncio.Event(), asyncio.Event()
        stream = CompletionStream(_blocking(started, release))
        consumer = asyncio.ensure_future(stream.collect())
        await started.wait()
        await asyncio.sleep(0)

        stream.abort()
        with pytest.raises(RequestAborted):
            await consumer
        assert stream.aborted
        assert stream.closed

    @pytest.mark.asyncio
    async def test_abort_is_idempotent(self):
        closed = []
        stream = CompletionStream(_chunks("a"), on_close=closed.append)
        stream.abort()
        stream.abort()
        assert len(closed) == 1
