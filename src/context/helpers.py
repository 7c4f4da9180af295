# src/context/helpers.py — v1
"""Context extraction helpers shared by prompts, cache keys and the orchestrator.

All scans are bounded to a window of lines around the cursor.
"""

from __future__ import annotations

import re

from ollamacopilot.context.classifier import DEFAULT_SCAN_WINDOW, scan_window
from ollamacopilot.context.scanner import find_unmatched_open_brace, strip_string_literals
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import Position

CURSOR_MARKER = "<CURSOR>"

_MAX_SCOPE_VARIABLES = 10
_MAX_IMPORT_CANDIDATES = 10

_DECLARED_VAR = re.compile(r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)")
_ASSIGNED_VAR = re.compile(r"^\s*([A-Za-z_]\w*)\s*(?::\s*[^=]+)?=(?!=)")
_PARAMS = re.compile(r"(?:function\s*[\w$]*|def\s+\w+|func\s+\w+)\s*\(([^)]*)\)")
_PROPERTY = re.compile(r"(?:^|[{,])\s*[\"']?([A-Za-z_$][\w$]*)[\"']?\s*:(?!:)")

_KEYWORDS = frozenset({
    "if", "else", "for", "while", "return", "function", "const", "let", "var",
    "class", "def", "import", "from", "new", "this", "self", "true", "false",
    "null", "None", "True", "False", "await", "async",
})

_BUILTIN_TYPES = frozenset({
    "Object", "Array", "String", "Number", "Boolean", "Promise", "Math", "JSON",
    "Date", "Error", "Map", "Set", "Symbol", "RegExp", "None", "True", "False",
    "Exception", "ValueError", "TypeError", "KeyError", "RuntimeError", "React",
    "console", "TODO", "FIXME",
})

_LANGUAGE_HINTS: dict[str, str] = {
    "typescript": "Use TypeScript type annotations where appropriate.",
    "typescriptreact": "Use TypeScript types and JSX syntax.",
    "javascript": "Use modern ES6+ syntax.",
    "javascriptreact": "Use modern ES6+ syntax and JSX.",
    "python": "Follow PEP 8 conventions.",
    "go": "Follow idiomatic Go style and handle errors explicitly.",
    "rust": "Follow idiomatic Rust and respect ownership rules.",
    "java": "Follow standard Java conventions.",
    "csharp": "Follow standard C# conventions.",
    "ruby": "Follow idiomatic Ruby style.",
    "php": "Follow PSR-12 style.",
}

_FRAMEWORK_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("React", re.compile(r"from\s+['\"]react['\"]|\buse(?:State|Effect|Memo|Ref)\(|React\.")),
    ("Vue", re.compile(r"from\s+['\"]vue['\"]|\bdefineComponent\(|<template>")),
    ("Angular", re.compile(r"@angular/|@Component\(")),
    ("Express", re.compile(r"require\(['\"]express['\"]\)|from\s+['\"]express['\"]|\bapp\.(?:get|post|use)\(")),
    ("Django", re.compile(r"\bfrom\s+django\b|\bmodels\.Model\b")),
    ("Flask", re.compile(r"\bfrom\s+flask\b|@app\.route\(")),
    ("FastAPI", re.compile(r"\bfrom\s+fastapi\b|@(?:app|router)\.(?:get|post|put|delete)\(")),
    ("Spring", re.compile(r"org\.springframework|@RestController|@Service\b")),
)

_CONTROL_KEYWORD = re.compile(
    r"^\s*(?:\}\s*)?(else\s+if|elif|else|if|foreach|for|while|do|switch|case|"
    r"try|catch|except|finally|with|match|unless|until|loop)\b"
)


def extract_variable_name(line: str) -> str | None:
    """Name being declared or assigned on the line, if any."""
    match = re.search(r"(?:const|let|var)\s+(\w+)\s*=", line)
    if match:
        return match.group(1)
    match = re.search(r"(?:this|self)\.(\w+)\s*=", line)
    if match:
        return match.group(1)
    match = re.search(r"(\w+)\s*=", line)
    return match.group(1) if match else None


def get_existing_properties(
    document: TextDocument, position: Position, window: int = DEFAULT_SCAN_WINDOW,
) -> list[str]:
    """Property names already declared in the enclosing object, in order."""
    lines = scan_window(document, position, window)
    found = find_unmatched_open_brace(lines)
    if found is None:
        return []
    start, column = found
    props: list[str] = []
    for index in range(start, len(lines)):
        text = lines[index][column + 1:] if index == start else lines[index]
        for match in _PROPERTY.finditer(text):
            name = match.group(1)
            if name not in props:
                props.append(name)
    return props


def find_variables_in_scope(
    document: TextDocument, position: Position, window: int = DEFAULT_SCAN_WINDOW,
) -> list[str]:
    """Names declared in the lines before the cursor, nearest first."""
    names: list[str] = []
    for line in reversed(scan_window(document, position, window)):
        text = strip_string_literals(line)
        found = _DECLARED_VAR.findall(text)
        assigned = _ASSIGNED_VAR.match(text)
        if assigned:
            found.append(assigned.group(1))
        for params in _PARAMS.findall(text):
            for param in params.split(","):
                name = re.split(r"[:=\s]", param.strip().lstrip("*"), maxsplit=1)[0]
                if name:
                    found.append(name)
        for name in found:
            if name not in names and name not in _KEYWORDS:
                names.append(name)
            if len(names) >= _MAX_SCOPE_VARIABLES:
                return names
    return names


def extract_comment_content(line: str) -> str:
    """Comment body of a line without its leader and closer."""
    text = line.strip()
    text = re.sub(r"^(?:<!--|/\*+|\*+/?|//+|#+|--)\s*", "", text)
    text = re.sub(r"\s*(?:\*/|-->)$", "", text)
    return text.strip()


def _is_comment_line(line: str) -> bool:
    return line.strip().startswith(("//", "#", "/*", "*", "--"))


def _split_identifier(name: str) -> str:
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name.replace("_", " "))
    return " ".join(spaced.lower().split())


def extract_function_purpose(
    document: TextDocument, position: Position, function_name: str,
) -> str:
    """Comment lines directly above the cursor, else the split function name."""
    comments: list[str] = []
    line = position.line - 1
    while line >= 0 and len(comments) < 5:
        text = document.line_at(line)
        if not _is_comment_line(text):
            break
        content = extract_comment_content(text)
        if content:
            comments.insert(0, content)
        line -= 1
    if comments:
        return " ".join(comments)
    if function_name:
        return _split_identifier(function_name)
    return "unknown"


def find_potential_imports(text: str) -> list[str]:
    """Capitalised identifiers used in the text but never declared or imported."""
    declared: set[str] = set()
    imported: set[str] = set()
    used: list[str] = []
    for line in text.split("\n"):
        if _is_comment_line(line):
            continue
        code = strip_string_literals(line)
        if re.match(r"^\s*(?:import|from)\b|.*\brequire\(", line):
            imported.update(re.findall(r"[A-Za-z_$][\w$]*", code))
            continue
        declared.update(
            re.findall(r"\b(?:class|interface|type|enum|function|def|const|let|var)\s+([A-Za-z_$][\w$]*)", code)
        )
        for name in re.findall(r"\b[A-Z][A-Za-z0-9_]*\b", code):
            if name not in used:
                used.append(name)
    candidates = [
        name for name in used
        if name not in declared and name not in imported and name not in _BUILTIN_TYPES
        and not name.isupper()
    ]
    return candidates[:_MAX_IMPORT_CANDIDATES]


def identify_control_structure_type(line: str) -> str:
    match = _CONTROL_KEYWORD.match(line)
    if not match:
        return "control"
    return " ".join(match.group(1).split())


def get_language_context(language: str, line: str, in_object_literal: bool) -> str:
    """Short language-specific hint for the generic prompt."""
    hints = [_LANGUAGE_HINTS.get(language, f"Follow idiomatic {language} style.")]
    stripped = line.rstrip()
    if in_object_literal:
        hints.append("The cursor is inside an object literal; complete its properties.")
    elif stripped.endswith("="):
        hints.append("Complete the right-hand side of the assignment.")
    elif stripped.endswith(("(", ",")):
        hints.append("Complete the argument list.")
    return " ".join(hints)


def get_framework_context(text: str) -> str:
    """Framework idioms detected in the text, as a one-line hint."""
    found = [name for name, pattern in _FRAMEWORK_PATTERNS if pattern.search(text)]
    if not found:
        return ""
    return f"The code uses {', '.join(found)}; follow its idioms."


def get_file_context(
    document: TextDocument, position: Position, before: int = 20, after: int = 5,
) -> str:
    """Bounded excerpt around the cursor with the cursor position marked."""
    start = max(0, position.line - before)
    end = min(document.line_count, position.line + after + 1)
    current = document.line_at(position.line)
    lines = [document.line_at(i) for i in range(start, position.line)]
    lines.append(current[: position.character] + CURSOR_MARKER + current[position.character:])
    lines.extend(document.line_at(i) for i in range(position.line + 1, end))
    return "\n".join(lines)
