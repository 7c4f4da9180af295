# tests/unit/postproc/test_unit_dedup.py — v1
"""Tests for postproc/dedup.py — removing text already typed before the cursor."""

from __future__ import annotations

import pytest

from ollamacopilot.core.models import ClassificationResult
from ollamacopilot.postproc.dedup import get_unique_completion, remove_prefix_overlap

GENERIC = ClassificationResult()
OBJECT = ClassificationResult(in_object_literal=True)


class TestPrefixOverlap:
    def test_full_prefix_echo(self):
        result = get_unique_completion("const x = 5;", "const x = ", GENERIC)
        assert result == "5;"
        assert "const x = " not in result

    def test_indented_prefix_echo(self):
        assert get_unique_completion("return total;", "    return ", GENERIC) == "total;"

    def test_tail_overlap_at_token_boundary(self):
        assert remove_prefix_overlap("items.map(fn)", "const out = items.") == "map(fn)"

    def test_no_overlap_inside_word(self):
        assert remove_prefix_overlap("ring()", "const s = st") == "ring()"

    def test_single_token_echo(self):
        assert remove_prefix_overlap("(x) {", "if (") == "x) {"

    def test_no_overlap(self):
        assert remove_prefix_overlap("5", "x = ") == "5"

    def test_blank_prefix(self):
        assert remove_prefix_overlap("  foo()", "   ") == "  foo()"

    def test_echo_only_is_nothing(self):
        assert get_unique_completion("const x = ", "const x = ", GENERIC) is None


class TestContexts:
    @pytest.mark.parametrize("completion", ["", "   ", "\n"])
    def test_blank(self, completion):
        assert get_unique_completion(completion, "x", GENERIC) is None

    @pytest.mark.parametrize("cls", [
        ClassificationResult(in_log_call=True),
        ClassificationResult(in_string_literal=True),
    ])
    def test_log_and_string_pass_through(self, cls):
        assert get_unique_completion("console.log(x", "console.log(", cls) == "console.log(x"

    def test_object_after_separator_starts_new_line(self):
        assert get_unique_completion("email: 'b',", "  name: 'a',", OBJECT) == "\n  email: 'b',"

    def test_object_after_open_brace_indents(self):
        assert get_unique_completion("id: 1,", "const user = {", OBJECT) == "\n  id: 1,"

    def test_object_blank_line(self):
        assert get_unique_completion("id: 1,", "    ", OBJECT) == "id: 1,"

    def test_object_partial_key(self):
        assert get_unique_completion("email: 'b',", "  email", OBJECT) == ": 'b',"

    def test_object_declaration_echo(self):
        assert get_unique_completion("const user = { id: 1,", "    ", OBJECT) == "id: 1,"
