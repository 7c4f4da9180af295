# src/context/classifier.py — v2
"""Context classifier: lexical facts about the cursor position.

Every detector is heuristic (regex and bounded scans) and returns False on
anything it does not recognise. classify() never raises.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from ollamacopilot.context.file_types import file_category
from ollamacopilot.context.scanner import (
    find_outside_strings,
    find_unmatched_open_brace,
    innermost_open_paren,
    open_quote,
    previous_non_blank,
    strip_line_comment,
)
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import ClassificationResult, Position

logger = logging.getLogger(__name__)

DEFAULT_SCAN_WINDOW = 50

# Tokens that, ending the text before a '{', make that brace an object literal.
_OBJECT_INTRODUCERS = ("=", ":", "(", ",", "[", "?", "||", "&&", "??", "return")

_CALLEE = re.compile(r"([A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*!?)\s*$")

_LOG_CALLEE = re.compile(
    r"""^(?:
        console\.(?:log|info|warn|error|debug|trace)
      | print | println | printf | puts | pprint
      | (?:println|print|eprintln|eprint|dbg)!
      | (?:[\w$]+\.)*(?:logger|logging|log|_logger|_log|LOG|LOGGER)
            \.(?:debug|info|warn|warning|error|exception|critical|fatal|trace|log)
      | fmt\.(?:Print|Println|Printf|Fprint|Fprintln|Fprintf|Sprintf)
      | log\.(?:Print|Println|Printf|Fatal|Fatalf|Panic|Panicf)
      | System\.(?:out|err)\.(?:print|println|printf)
    )$""",
    re.VERBOSE,
)

_FUNCTION_HEADER = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:pub(?:\([\w:]+\))?\s+)?(?:async\s+)?"
    r"(?:function\*?|def|func|fn)\b"
    r"|^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s+)?"
    r"(?:\([^)]*\)|\w+)\s*=>"
)

_CLASS_HEADER = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?(?:public\s+|final\s+)?"
    r"(?:class|interface)\b"
)

_IMPORT = re.compile(
    r"^\s*import\b"
    r"|^\s*from\s+[\w.]+\s*(?:import\b|$)"
    r"|^\s*(?:const|let|var)\s+.+=\s*require\("
    r"|^\s*#\s*include\b"
    r"|^\s*use\s+[\w:]+"
)

_CONTROL_HEADER = re.compile(
    r"^\s*(?:\}\s*)?(?:if|else\s+if|elif|else|for|foreach|while|do|switch|case|"
    r"try|catch|except|finally|with|match|unless|until|loop)\b"
    # A keyword used as a variable name is assignment or attribute access.
    r"(?!\s*(?:[-+*/%&|^]?=(?!=)|\.|:=))"
)

# "case x:" and "default:" labels open a block, not an object.
_CASE_LABEL = re.compile(r"^\s*(?:\}\s*)?(?:case\s+\S.*|default)\s*:$")
_BARE_DEFAULT = re.compile(r"^\s*(?:\}\s*)?default\s*:$")

HASH_COMMENT_LANGUAGES = frozenset({
    "python", "ruby", "shellscript", "perl", "r", "yaml", "toml",
    "dockerfile", "makefile", "powershell", "coffeescript", "elixir",
})
DASH_COMMENT_LANGUAGES = frozenset({"sql", "lua", "haskell"})
MARKUP_COMMENT_LANGUAGES = frozenset({"html", "xml", "markdown", "vue", "svelte"})


def comment_leaders(language_id: str) -> tuple[str, ...]:
    """Comment-leader tokens for a language id."""
    if language_id in HASH_COMMENT_LANGUAGES:
        return ("#",)
    if language_id in DASH_COMMENT_LANGUAGES:
        return ("--",)
    if language_id in MARKUP_COMMENT_LANGUAGES:
        return ("<!--",)
    return ("//", "/*")


def scan_window(
    document: TextDocument, position: Position, window: int = DEFAULT_SCAN_WINDOW,
) -> list[str]:
    """Lines preceding the cursor (at most ``window``) plus the line prefix."""
    start = max(0, position.line - window)
    lines = [document.line_at(i) for i in range(start, position.line)]
    lines.append(document.line_prefix(position))
    return lines


def is_object_literal(lines: Sequence[str]) -> bool:
    found = find_unmatched_open_brace(lines)
    if found is None:
        return False
    index, column = found
    before = lines[index][:column].rstrip()
    if not before:
        before = previous_non_blank(lines, index)
    if not before:
        return False
    if _CASE_LABEL.match(before):
        if not _BARE_DEFAULT.match(before):
            return False
        # "default:" is also a legal key; its own enclosing brace decides.
        return is_object_literal([*lines[:index], lines[index][:column].rstrip()[:-1]])
    return before.endswith(_OBJECT_INTRODUCERS)


def open_call_text(lines: Sequence[str]) -> str | None:
    """Statement text up to the cursor when it still has an unclosed '('.

    Walks back over continuation lines so a call whose arguments span
    several lines is found. Stops at a line ending a statement or block.
    """
    text = lines[-1]
    if innermost_open_paren(text) is not None:
        return text
    for line in reversed(lines[:-1]):
        line = strip_line_comment(line).rstrip()
        if line.endswith((";", "}")):
            return None
        text = f"{line}\n{text}"
        if innermost_open_paren(text) is not None:
            return text
        if line.endswith("{"):
            return None
    return None


def is_log_call(lines: str | Sequence[str]) -> bool:
    """True when the innermost open call is a logging or print call."""
    if isinstance(lines, str):
        lines = [lines]
    text = open_call_text(lines)
    if text is None:
        return False
    paren = innermost_open_paren(text)
    match = _CALLEE.search(text[:paren])
    if match is None:
        return False
    callee = re.sub(r"\s+", "", match.group(1))
    return bool(_LOG_CALLEE.match(callee))


def is_string_literal(prefix: str) -> bool:
    return open_quote(prefix) is not None


def is_function_header(prefix: str) -> bool:
    return bool(_FUNCTION_HEADER.match(prefix))


def is_class_header(prefix: str) -> bool:
    return bool(_CLASS_HEADER.match(prefix))


def is_import(prefix: str) -> bool:
    return bool(_IMPORT.match(prefix))


def is_comment(prefix: str, language_id: str) -> bool:
    stripped = prefix.lstrip()
    if language_id not in HASH_COMMENT_LANGUAGES | DASH_COMMENT_LANGUAGES | MARKUP_COMMENT_LANGUAGES:
        # JSDoc / block comment continuation lines.
        if stripped == "*" or stripped.startswith(("* ", "*/")):
            return True
    for leader in comment_leaders(language_id):
        if stripped.startswith(leader):
            return True
        if find_outside_strings(prefix, leader) != -1:
            return True
    return False


def is_control_structure_header(prefix: str) -> bool:
    return bool(_CONTROL_HEADER.match(prefix))


def classify(
    document: TextDocument, position: Position, window: int = DEFAULT_SCAN_WINDOW,
) -> ClassificationResult:
    """Classify the lexical context at the cursor."""
    lines = scan_window(document, position, window)
    prefix = lines[-1]
    language = document.language_id
    result = ClassificationResult(
        in_object_literal=is_object_literal(lines),
        in_log_call=is_log_call(lines),
        in_string_literal=is_string_literal(prefix),
        in_function_header=is_function_header(prefix),
        in_class_header=is_class_header(prefix),
        in_import=is_import(prefix),
        in_comment=is_comment(prefix, language),
        in_control_structure_header=is_control_structure_header(prefix),
        file_category=file_category(document.file_extension),
    )
    logger.debug("Context at %d:%d: %s", position.line, position.character, result)
    return result
