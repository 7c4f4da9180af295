# src/prompts/synthesizer.py — v1
"""Prompt synthesizer: pick one template for the cursor context.

Several classification flags can hold at once, so templates are chosen from
an ordered rule list; the first rule whose predicate matches wins:

   1. file category (markdown, HTML, stylesheet, structured data, query)
   2. comment
   3. import
   4. function header
   5. class header
   6. control structure header
   7. log call (message string vs. arguments)
   8. string literal
   9. object-literal body on a blank line or a fresh empty object
  10. generic fallback
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ollamacopilot.context import helpers
from ollamacopilot.context.classifier import scan_window
from ollamacopilot.context.file_types import is_markdown
from ollamacopilot.context.scanner import find_unmatched_open_brace, strip_string_literals
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import ClassificationResult, FileCategory, Position, PromptSpec
from ollamacopilot.prompts import templates

logger = logging.getLogger(__name__)


class PromptKind(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    STYLESHEET = "stylesheet"
    STRUCTURED_DATA = "structured_data"
    QUERY = "query"
    COMMENT = "comment"
    IMPORT = "import"
    FUNCTION = "function"
    CLASS = "class"
    CONTROL_STRUCTURE = "control_structure"
    LOG_CALL = "log_call"
    STRING_LITERAL = "string_literal"
    OBJECT_PROPERTY = "object_property"
    GENERIC = "generic"


@dataclass(frozen=True)
class PromptContext:
    """Everything a template builder may read."""

    classification: ClassificationResult
    document: TextDocument
    position: Position
    excerpt: str

    @property
    def line(self) -> str:
        return self.document.line_at(self.position.line)

    @property
    def prefix(self) -> str:
        return self.document.line_prefix(self.position)

    @property
    def language(self) -> str:
        return self.document.language_id

    @property
    def indentation(self) -> str:
        match = re.match(r"^\s*", self.prefix)
        return match.group(0) if match else ""


@dataclass(frozen=True)
class PromptRule:
    kind: PromptKind
    predicate: Callable[[PromptContext], bool]
    build: Callable[[PromptContext], str]


# ----------------------------------------------------------------------
# File categories
# ----------------------------------------------------------------------

def _markdown(ctx: PromptContext) -> str:
    prefix = ctx.prefix
    if re.match(r"^\s*\|.*\|\s*$", prefix):
        element = "table"
    elif "```" in prefix:
        element = "code block"
    elif re.match(r"^\s*#{1,6}\s", prefix):
        element = "heading"
    elif re.match(r"^\s*(?:[-*+]|\d+\.)\s", prefix):
        element = "list item"
    else:
        element = "general markdown"
    return templates.MARKDOWN.format(element=element)


def _html(ctx: PromptContext) -> str:
    prefix = ctx.prefix
    if re.search(r"\s[\w-]+=(?:[\"'][^\"']*)?$", prefix):
        return templates.HTML_ATTRIBUTE
    if re.search(r"<[^>]*$", prefix):
        return templates.HTML_TAG
    return templates.HTML_CONTENT


def _inside_css_block(ctx: PromptContext) -> bool:
    depth = 0
    for line in scan_window(ctx.document, ctx.position):
        code = strip_string_literals(line)
        depth += code.count("{") - code.count("}")
    return depth > 0


def _stylesheet(ctx: PromptContext) -> str:
    inside = _inside_css_block(ctx)
    prop = re.match(r"^\s*([\w-]+)\s*:\s*[^;]*$", ctx.prefix)
    if inside and prop:
        return templates.CSS_PROPERTY.format(property=prop.group(1))
    if not inside:
        return templates.CSS_SELECTOR
    return templates.CSS_RULE


def _structured_data(ctx: PromptContext) -> str:
    name = ctx.document.file_name.replace("\\", "/").lower()
    if name.endswith("package.json"):
        schema = "package.json"
    elif name.endswith("tsconfig.json"):
        schema = "tsconfig.json"
    elif name.endswith(".vscode/settings.json"):
        schema = "VS Code settings"
    else:
        schema = "generic JSON"
    return templates.JSON.format(schema=schema)


_SQL_STATEMENTS = ("SELECT", "INSERT", "UPDATE", "DELETE", "CREATE TABLE", "ALTER TABLE")


def _query(ctx: PromptContext) -> str:
    prefix = ctx.prefix.upper()
    statement = "SQL"
    # Later entries are more specific and override earlier ones.
    for candidate in _SQL_STATEMENTS:
        if candidate in prefix:
            statement = candidate
    return templates.SQL.format(statement=statement)


# ----------------------------------------------------------------------
# Headers
# ----------------------------------------------------------------------

def _comment(ctx: PromptContext) -> str:
    return templates.COMMENT_TO_CODE.format(
        language=ctx.language, comment=helpers.extract_comment_content(ctx.line),
    )


def _import(ctx: PromptContext) -> str:
    identifiers = helpers.find_potential_imports(ctx.document.full_text())
    return templates.IMPORT.format(
        language=ctx.language, identifiers=", ".join(identifiers) or "none detected",
    )


def _function(ctx: PromptContext) -> str:
    match = re.search(r"(?:function\*?|def|func|fn)\s+(\w+)", ctx.prefix) or re.search(
        r"(?:const|let|var)\s+(\w+)", ctx.prefix
    )
    name = match.group(1) if match else ""
    purpose = helpers.extract_function_purpose(ctx.document, ctx.position, name)
    return templates.FUNCTION.format(language=ctx.language, name=name, purpose=purpose)


def _class(ctx: PromptContext) -> str:
    match = re.search(r"(?:class|interface)\s+(\w+)", ctx.line)
    return templates.CLASS.format(language=ctx.language, name=match.group(1) if match else "")


def _control_structure(ctx: PromptContext) -> str:
    return templates.CONTROL_STRUCTURE.format(
        language=ctx.language,
        structure=helpers.identify_control_structure_type(ctx.line),
    )


# ----------------------------------------------------------------------
# Log calls and strings
# ----------------------------------------------------------------------

def _log_call(ctx: PromptContext) -> str:
    if ctx.classification.in_string_literal:
        return templates.LOG_MESSAGE
    variables = helpers.find_variables_in_scope(ctx.document, ctx.position)
    return templates.LOG_ARGUMENTS.format(variables=", ".join(variables) or "none found")


# Checked in this order against the whole line; the first match wins.
_LINE_PURPOSES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("error", re.compile(r"error", re.IGNORECASE)),
    ("message", re.compile(r"message|msg", re.IGNORECASE)),
    ("url", re.compile(r"url", re.IGNORECASE)),
    ("name", re.compile(r"name", re.IGNORECASE)),
    ("email", re.compile(r"email", re.IGNORECASE)),
    ("phone", re.compile(r"phone", re.IGNORECASE)),
    ("address", re.compile(r"address", re.IGNORECASE)),
    ("description", re.compile(r"description|desc", re.IGNORECASE)),
    ("title", re.compile(r"title", re.IGNORECASE)),
    ("identifier", re.compile(r"\bid\b|_id\b|[a-z]Id\b|\bID\b")),
)

# Fallback order on the declared variable name.
_VARIABLE_PURPOSES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("name", ("name",)),
    ("email", ("email",)),
    ("phone", ("phone",)),
    ("address", ("address",)),
    ("description", ("description", "desc")),
    ("title", ("title",)),
    ("identifier", ("id",)),
    ("url", ("url",)),
    ("message", ("message", "msg")),
)


def string_purpose(line: str, var_name: str | None) -> str | None:
    """Purpose keyword of a string literal, from the line then the variable name."""
    for purpose, pattern in _LINE_PURPOSES:
        if pattern.search(line):
            return purpose
    if var_name:
        lowered = var_name.lower()
        for purpose, needles in _VARIABLE_PURPOSES:
            if any(needle in lowered for needle in needles):
                return purpose
    return None


def _string_literal(ctx: PromptContext) -> str:
    match = re.search(r"(?:const|let|var)\s+(\w+)\s*=", ctx.line)
    var_name = match.group(1) if match else helpers.extract_variable_name(ctx.prefix)
    purpose = string_purpose(ctx.line, var_name)
    if purpose is not None:
        text = templates.STRING_PURPOSES[purpose]
    elif var_name:
        text = templates.STRING_FOR_VARIABLE.format(name=var_name)
    else:
        text = templates.STRING_GENERAL
    return templates.STRING_LITERAL.format(purpose=text)


# ----------------------------------------------------------------------
# Object literals
# ----------------------------------------------------------------------

def _is_property_slot(ctx: PromptContext) -> bool:
    content = ctx.prefix.strip()
    if not content:
        return True
    next_line = ctx.document.line_at(ctx.position.line + 1).strip()
    opens_object = content.endswith("{") or "= {" in content
    return opens_object and next_line in ("", "}", "};")


def object_variable_name(document: TextDocument, position: Position) -> str:
    """Variable owning the enclosing object: from the prefix, else the brace line."""
    name = helpers.extract_variable_name(document.line_prefix(position))
    if name:
        return name
    lines = scan_window(document, position)
    found = find_unmatched_open_brace(lines)
    if found is None:
        return ""
    index, column = found
    return helpers.extract_variable_name(lines[index][:column]) or ""


def property_candidates(var_name: str) -> tuple[str, ...]:
    """Candidate property list for the variable's semantic bucket."""
    lowered = var_name.lower()
    if "user" in lowered or "account" in lowered:
        return templates.USER_PROPERTIES
    if "config" in lowered or "setting" in lowered:
        return templates.CONFIG_PROPERTIES
    if "time" in lowered or "date" in lowered:
        return templates.TIME_PROPERTIES
    return templates.GENERIC_PROPERTIES


def _object_property(ctx: PromptContext) -> str:
    var_name = object_variable_name(ctx.document, ctx.position)
    existing = helpers.get_existing_properties(ctx.document, ctx.position)
    available = [p for p in property_candidates(var_name) if p not in existing]
    indent = ctx.indentation if not ctx.prefix.strip() else ctx.indentation + "  "
    return templates.OBJECT_PROPERTY.format(
        name=var_name,
        existing=", ".join(existing) or "none",
        indent=indent,
        candidates=", ".join(available),
    )


# ----------------------------------------------------------------------
# Fallback
# ----------------------------------------------------------------------

def _generic(ctx: PromptContext) -> str:
    return templates.GENERIC.format(
        language=ctx.language,
        language_hint=helpers.get_language_context(
            ctx.language, ctx.prefix, ctx.classification.in_object_literal
        ),
        framework_hint=helpers.get_framework_context(ctx.excerpt),
        indent_width=len(ctx.indentation),
    )


def _category(category: FileCategory) -> Callable[[PromptContext], bool]:
    return lambda ctx: ctx.classification.file_category is category


RULES: tuple[PromptRule, ...] = (
    PromptRule(
        PromptKind.MARKDOWN,
        lambda ctx: ctx.classification.file_category is FileCategory.MARKUP
        and is_markdown(ctx.document.file_extension),
        _markdown,
    ),
    PromptRule(
        PromptKind.HTML,
        lambda ctx: ctx.classification.file_category is FileCategory.MARKUP
        and not is_markdown(ctx.document.file_extension),
        _html,
    ),
    PromptRule(PromptKind.STYLESHEET, _category(FileCategory.STYLESHEET), _stylesheet),
    PromptRule(PromptKind.STRUCTURED_DATA, _category(FileCategory.STRUCTURED_DATA), _structured_data),
    PromptRule(PromptKind.QUERY, _category(FileCategory.QUERY), _query),
    PromptRule(PromptKind.COMMENT, lambda ctx: ctx.classification.in_comment, _comment),
    PromptRule(PromptKind.IMPORT, lambda ctx: ctx.classification.in_import, _import),
    PromptRule(PromptKind.FUNCTION, lambda ctx: ctx.classification.in_function_header, _function),
    PromptRule(PromptKind.CLASS, lambda ctx: ctx.classification.in_class_header, _class),
    PromptRule(
        PromptKind.CONTROL_STRUCTURE,
        lambda ctx: ctx.classification.in_control_structure_header,
        _control_structure,
    ),
    PromptRule(PromptKind.LOG_CALL, lambda ctx: ctx.classification.in_log_call, _log_call),
    PromptRule(
        PromptKind.STRING_LITERAL, lambda ctx: ctx.classification.in_string_literal, _string_literal,
    ),
    PromptRule(
        PromptKind.OBJECT_PROPERTY,
        lambda ctx: ctx.classification.in_object_literal and _is_property_slot(ctx),
        _object_property,
    ),
    PromptRule(PromptKind.GENERIC, lambda ctx: True, _generic),
)


def select_rule(ctx: PromptContext) -> PromptRule:
    """First rule whose predicate holds; the generic rule always does."""
    for rule in RULES:
        if rule.predicate(ctx):
            return rule
    return RULES[-1]


def synthesize(
    classification: ClassificationResult,
    document: TextDocument,
    position: Position,
    context_excerpt: str,
) -> PromptSpec:
    """Build the prompt for the request at ``position``."""
    ctx = PromptContext(classification, document, position, context_excerpt)
    rule = select_rule(ctx)
    instruction = f"{rule.build(ctx)}\n{templates.OUTPUT_CONTRACT}"
    logger.debug("Selected prompt template: %s", rule.kind.value)
    return PromptSpec(
        kind=rule.kind.value,
        instruction_text=instruction,
        context_excerpt=context_excerpt,
    )
