# tests/unit/prompts/test_unit_synthesizer.py — v2
"""Tests for prompts/synthesizer.py — template selection and filling."""

from __future__ import annotations

import pytest

from ollamacopilot.context.classifier import classify
from ollamacopilot.context.helpers import get_file_context
from ollamacopilot.core.document import InMemoryDocument
from ollamacopilot.core.models import ClassificationResult, FileCategory, Position
from ollamacopilot.prompts import templates
from ollamacopilot.prompts.synthesizer import (
    PromptKind,
    property_candidates,
    string_purpose,
    synthesize,
)


def _prompt(text: str, file_name: str = "app.ts", language_id: str | None = None):
    doc, pos = InMemoryDocument.with_cursor(text, file_name=file_name, language_id=language_id)
    return synthesize(classify(doc, pos), doc, pos, get_file_context(doc, pos))


class TestTemplateSelection:
    @pytest.mark.parametrize("text,file_name,kind", [
        ("# Title\n- item|", "README.md", PromptKind.MARKDOWN),
        ("<div class=\"|", "index.html", PromptKind.HTML),
        (".btn {\n  color: |", "site.css", PromptKind.STYLESHEET),
        ('{\n  "name": |', "package.json", PromptKind.STRUCTURED_DATA),
        ("SELECT * FROM users WHERE |", "q.sql", PromptKind.QUERY),
        ("// sort users by age|", "app.ts", PromptKind.COMMENT),
        ("import { |", "app.ts", PromptKind.IMPORT),
        ("function loadUser(|", "app.ts", PromptKind.FUNCTION),
        ("class UserStore |", "app.ts", PromptKind.CLASS),
        ("if (|", "app.ts", PromptKind.CONTROL_STRUCTURE),
        ("console.log(|", "app.ts", PromptKind.LOG_CALL),
        ("console.log(\n  |", "app.ts", PromptKind.LOG_CALL),
        ("const title = '|", "app.ts", PromptKind.STRING_LITERAL),
        ("const user = {\n  |\n}", "app.ts", PromptKind.OBJECT_PROPERTY),
        ("const total = |", "app.ts", PromptKind.GENERIC),
        ("loop = asyncio.get_event_loop()|", "main.py", PromptKind.GENERIC),
        ("match = re.search(pattern, text)|", "main.py", PromptKind.GENERIC),
    ])
    def test_kind(self, text, file_name, kind):
        assert _prompt(text, file_name).kind == kind.value

    def test_file_category_wins_over_cursor_flags(self):
        assert _prompt("-- note about |", "q.sql").kind == PromptKind.QUERY.value

    def test_log_call_wins_over_string(self):
        assert _prompt("console.log('user |").kind == PromptKind.LOG_CALL.value

    def test_object_with_typed_property_falls_back_to_generic(self):
        assert _prompt("const user = {\n  name: |\n}").kind == PromptKind.GENERIC.value


class TestOutputContract:
    @pytest.mark.parametrize("text", ["const total = |", "console.log(|", "// note|"])
    def test_every_prompt_carries_contract(self, text):
        assert templates.OUTPUT_CONTRACT in _prompt(text).instruction_text

    def test_render_includes_cursor_excerpt(self):
        rendered = _prompt("const a = 1;\nconst b = |").render()
        assert "Context:\nconst a = 1;\nconst b = <CURSOR>" in rendered


class TestFilledTemplates:
    def test_log_message_vs_arguments(self):
        assert templates.LOG_MESSAGE in _prompt("console.log('|").instruction_text
        args = _prompt("const count = 3;\nconsole.log(|").instruction_text
        assert "count" in args

    def test_object_property_excludes_existing(self):
        spec = _prompt("const user = {\n  name: 'a',\n  |\n}")
        text = spec.instruction_text
        assert "'user'" in text
        assert "existing properties: name." in text
        candidates = text.split("choose one): ", 1)[1].split("\n", 1)[0]
        assert "name" not in candidates.split(", ")
        assert "email" in candidates.split(", ")

    def test_object_property_indentation(self):
        text = _prompt("const cfg = {|\n}").instruction_text
        assert 'indentation: "  "' in text

    def test_function_purpose_from_comment(self):
        text = _prompt("// Parse the config file\nfunction parse|").instruction_text
        assert "Purpose: Parse the config file" in text

    def test_import_lists_candidates(self):
        text = _prompt("import { |\nconst s = new UserService();").instruction_text
        assert "UserService" in text

    def test_sql_statement(self):
        text = _prompt("UPDATE users SET |", "q.sql").instruction_text
        assert "UPDATE statement" in text

    def test_json_schema_from_file_name(self):
        text = _prompt('{\n  "scripts": |', "package.json").instruction_text
        assert "package.json" in text

    def test_css_property(self):
        text = _prompt(".btn {\n  color: |", "site.css").instruction_text
        assert "Property: color" in text

    def test_css_selector_outside_block(self):
        text = _prompt(".btn|", "site.css").instruction_text
        assert text.startswith(templates.CSS_SELECTOR)

    def test_markdown_element(self):
        assert "heading" in _prompt("## Inst|", "README.md").instruction_text

    def test_generic_mentions_language_and_framework(self):
        text = _prompt(
            "import React from 'react';\nconst [a, setA] = useState(0);\nconst total = |",
            "app.tsx",
        ).instruction_text
        assert "typescriptreact" in text
        assert "React" in text

    def test_control_structure_type(self):
        text = _prompt("while (|").instruction_text
        assert "while structure" in text


class TestStringPurpose:
    @pytest.mark.parametrize("line,var_name,expected", [
        ("throw new Error('", None, "error"),
        ("const msg = '", "msg", "message"),
        ("const apiUrl = '", "apiUrl", "url"),
        ("const userEmail = '", "userEmail", "email"),
        ("const userId = '", "userId", "identifier"),
        ("const x = '", "pageTitle", "title"),
        ("const x = '", "foo", None),
    ])
    def test_purpose(self, line, var_name, expected):
        assert string_purpose(line, var_name) == expected

    def test_first_keyword_in_order_wins(self):
        assert string_purpose("const errorMessage = '", None) == "error"


class TestPropertyCandidates:
    def test_buckets(self):
        assert property_candidates("currentUser") == templates.USER_PROPERTIES
        assert property_candidates("appConfig") == templates.CONFIG_PROPERTIES
        assert property_candidates("startTime") == templates.TIME_PROPERTIES
        assert property_candidates("thing") == templates.GENERIC_PROPERTIES


class TestExplicitClassification:
    def test_synthesize_uses_given_classification(self):
        doc = InMemoryDocument("x")
        spec = synthesize(
            ClassificationResult(file_category=FileCategory.QUERY), doc, Position(0, 1), "x<CURSOR>",
        )
        assert spec.kind == PromptKind.QUERY.value
        assert spec.context_excerpt == "x<CURSOR>"
