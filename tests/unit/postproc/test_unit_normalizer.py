# tests/unit/postproc/test_unit_normalizer.py — v1
"""Tests for postproc/normalizer.py — context-aware response cleaning."""

from __future__ import annotations

import pytest

from ollamacopilot.core.models import ClassificationResult, FileCategory
from ollamacopilot.postproc.normalizer import (
    clean_log_arguments,
    clean_object_property,
    clean_response,
    extract_code_fence,
    strip_reasoning,
)

GENERIC = ClassificationResult()
STRING = ClassificationResult(in_string_literal=True)
LOG_STRING = ClassificationResult(in_log_call=True, in_string_literal=True)
LOG_ARGS = ClassificationResult(in_log_call=True)
OBJECT = ClassificationResult(in_object_literal=True)


class TestAllContexts:
    def test_strips_reasoning_block(self):
        raw = "<think>the user wants a sum</think>a + b"
        assert clean_response(raw, GENERIC, "return ") == "a + b"

    def test_strips_unterminated_reasoning(self):
        assert strip_reasoning("x<thinking>still going") == "x"

    def test_strips_dangling_reasoning_close(self):
        assert strip_reasoning("plan...</think>value") == "value"

    def test_strips_wrapper_tags(self):
        assert clean_response("<answer><code>foo()</code></answer>", GENERIC, "") == "foo()"

    def test_extracts_code_fence(self):
        raw = "Here you go:\n```typescript\nconst x = 1;\n```\nHope this helps"
        assert clean_response(raw, GENERIC, "") == "const x = 1;"

    def test_unterminated_fence(self):
        assert extract_code_fence("```js\nfoo()") == "foo()"

    def test_markup_keeps_fences(self):
        markdown = ClassificationResult(file_category=FileCategory.MARKUP)
        assert clean_response("```bash\nls\n```", markdown, "").startswith("```bash")

    @pytest.mark.parametrize("raw", ["", "   ", "<think>only thoughts</think>"])
    def test_nothing_usable(self, raw):
        assert clean_response(raw, GENERIC, "") == ""


class TestStringContexts:
    def test_suggested_message_in_string(self):
        assert clean_response("'suggested message: hello world'", STRING, "const s = '") == "hello world"

    def test_suggested_message_in_log_string(self):
        assert clean_response('"Suggested message: User logged in"', LOG_STRING, "console.log('") == (
            "User logged in"
        )

    @pytest.mark.parametrize("raw", [
        "Suggested completion: Not found",
        "Example: Not found",
        "You could use: Not found",
        "'Not found'",
    ])
    def test_string_fillers(self, raw):
        assert clean_response(raw, STRING, "throw new Error('") == "Not found"

    def test_trailing_quote_after_opening_quote(self):
        assert clean_response("Not found'", STRING, "const s = '") == "Not found"

    def test_inner_text_kept(self):
        assert clean_response("an example value", STRING, "const s = '") == "an example value"


class TestLogArguments:
    def test_wrapping_parens(self):
        assert clean_log_arguments("('count', count)") == "'count', count"

    def test_unbalanced_closing_paren_and_semicolon(self):
        assert clean_log_arguments("'total:', total);") == "'total:', total"

    def test_call_inside_arguments_kept(self):
        assert clean_log_arguments("user.getName()") == "user.getName()"

    def test_repairs_unterminated_quote(self):
        assert clean_response("'Loading user", LOG_ARGS, "console.log(") == "'Loading user'"

    def test_closed_quote_untouched(self):
        assert clean_response("'User: ' + name", LOG_ARGS, "console.log(") == "'User: ' + name"

    def test_suggested_argument_filler(self):
        assert clean_response("Suggested argument: err", LOG_ARGS, "logger.error(") == "err"


class TestObjectLiteral:
    def test_skips_existing_property(self):
        raw = "const user = {\n  name: 'a',\n  email: 'b'\n}"
        assert clean_response(raw, OBJECT, "  ", existing_properties={"name"}) == "email: 'b',"

    def test_normalizes_spacing_and_quoted_keys(self):
        assert clean_object_property('"age":30') == "age: 30,"

    def test_strips_inline_comment(self):
        assert clean_object_property("id: 1, // primary key") == "id: 1,"

    def test_keeps_urls_in_values(self):
        assert clean_object_property("url: 'http://example.com',") == "url: 'http://example.com',"

    def test_collapses_duplicated_name(self):
        assert clean_object_property("email email: 'a@b.c'") == "email: 'a@b.c',"

    def test_collapses_empty_brackets(self):
        assert clean_object_property("tags: [ ]") == "tags: [],"

    def test_rejects_multiline_values(self):
        assert clean_object_property("address: {\n  city: 'x',\n}") == "city: 'x',"

    def test_no_property_line(self):
        assert clean_response("// no idea", OBJECT, "  ") == ""

    def test_all_candidates_existing(self):
        assert clean_object_property("name: 'x'", ["name"]) == ""


class TestGeneric:
    def test_suggested_code_preamble(self):
        assert clean_response("Suggested code: return a + b;", GENERIC, "  ") == "return a + b;"

    def test_trims(self):
        assert clean_response("  foo()  \n", GENERIC, "") == "foo()"
