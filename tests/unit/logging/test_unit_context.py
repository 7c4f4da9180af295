# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from ollamacopilot.logging.context import clear_context, get_context, set_request_context


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.generation is None
        assert ctx.language_id is None
        assert ctx.file_name is None

    def test_set_request_context(self):
        set_request_context(2, "go", "main.go")
        ctx = get_context()
        assert ctx.generation == 2
        assert ctx.language_id == "go"
        assert ctx.file_name == "main.go"

    def test_as_dict_filters_none(self):
        assert get_context().as_dict() == {}
        set_request_context(0, "go", "main.go")
        assert get_context().as_dict()["generation"] == 0

    def test_clear(self):
        set_request_context(1, "go", "main.go")
        clear_context()
        assert get_context().generation is None

    @pytest.mark.asyncio
    async def test_isolated_per_task(self):
        async def worker(generation: int) -> int | None:
            set_request_context(generation, "ts", "a.ts")
            await asyncio.sleep(0)
            return get_context().generation

        results = await asyncio.gather(worker(1), worker(2))
        assert results == [1, 2]
