# src/context/scanner.py — v1
"""Bounded lexical scans over line windows.

These are finite, stack-based scans, not a parser. Every function takes
plain strings (a line prefix, or a window of lines whose last element is the
current line prefix) so each rule can be tested in isolation.
"""

from __future__ import annotations

from typing import Sequence

QUOTE_CHARS = "'\"`"


def string_mask(text: str) -> list[bool]:
    """Mark every character belonging to a string literal, quotes included.

    Quotes of one kind inside a string of another kind are plain content.
    An unterminated string runs to the end of the text.
    """
    mask = [False] * len(text)
    quote: str | None = None
    escaped = False
    for i, ch in enumerate(text):
        if quote is not None:
            mask[i] = True
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in QUOTE_CHARS:
            quote = ch
            mask[i] = True
    return mask


def open_quote(prefix: str) -> str | None:
    """Return the quote character of the string left open at the end of prefix."""
    quote: str | None = None
    escaped = False
    for ch in prefix:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote is not None:
            if ch == quote:
                quote = None
        elif ch in QUOTE_CHARS:
            quote = ch
    return quote


def strip_string_literals(text: str) -> str:
    """Blank out string literals, keeping column positions intact."""
    mask = string_mask(text)
    return "".join(" " if masked else ch for ch, masked in zip(text, mask))


def find_outside_strings(text: str, token: str, start: int = 0) -> int:
    """Index of the first occurrence of token not inside a string, or -1."""
    mask = string_mask(text)
    index = text.find(token, start)
    while index != -1:
        if not mask[index]:
            return index
        index = text.find(token, index + 1)
    return -1


def strip_line_comment(text: str, leader: str = "//") -> str:
    """Drop a trailing line comment that starts outside a string."""
    index = find_outside_strings(text, leader)
    return text if index == -1 else text[:index]


def innermost_open_paren(prefix: str) -> int | None:
    """Column of the innermost '(' still unclosed at the end of prefix."""
    mask = string_mask(prefix)
    stack: list[int] = []
    for i, ch in enumerate(prefix):
        if mask[i]:
            continue
        if ch == "(":
            stack.append(i)
        elif ch == ")" and stack:
            stack.pop()
    return stack[-1] if stack else None


def find_unmatched_open_brace(lines: Sequence[str]) -> tuple[int, int] | None:
    """Scan backward for the innermost '{' not closed before the cursor.

    ``lines`` is the scan window; its last element is the current line
    prefix. Returns ``(index_in_window, column)`` or None. A ';' met at depth
    zero ends the scan: the cursor sits in a statement list, not an object.
    """
    depth = 0
    for index in range(len(lines) - 1, -1, -1):
        text = strip_string_literals(strip_line_comment(lines[index]))
        for column in range(len(text) - 1, -1, -1):
            ch = text[column]
            if ch == "}":
                depth += 1
            elif ch == "{":
                if depth:
                    depth -= 1
                else:
                    return index, column
            elif ch == ";" and depth == 0:
                return None
    return None


def previous_non_blank(lines: Sequence[str], index: int) -> str:
    """Nearest non-blank line strictly before index, stripped; '' if none."""
    for i in range(index - 1, -1, -1):
        stripped = lines[i].strip()
        if stripped:
            return stripped
    return ""
