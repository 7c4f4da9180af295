# src/core/document.py — v2
"""Text window accessor boundary and an in-memory implementation.

The host editor owns the real document. Everything in the completion engine
reads it through the TextDocument protocol: synchronous, side-effect-free
line reads around the cursor.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Protocol, runtime_checkable

from ollamacopilot.core.models import Position


@runtime_checkable
class TextDocument(Protocol):
    """Read-only view of the document being edited."""

    @property
    def language_id(self) -> str: ...

    @property
    def file_name(self) -> str: ...

    @property
    def file_extension(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def line_at(self, line: int) -> str: ...

    def line_prefix(self, position: Position) -> str: ...

    def line_suffix(self, position: Position) -> str: ...

    def full_text(self) -> str: ...


# Extension → language id, used when the caller does not supply one.
_LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "jsx": "javascriptreact",
    "ts": "typescript",
    "tsx": "typescriptreact",
    "go": "go",
    "rs": "rust",
    "java": "java",
    "rb": "ruby",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "sh": "shellscript",
    "lua": "lua",
    "md": "markdown",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "json": "json",
    "sql": "sql",
    "yaml": "yaml",
    "yml": "yaml",
}


class InMemoryDocument:
    """TextDocument over a plain string."""

    def __init__(
        self, text: str, file_name: str = "untitled.txt", language_id: str | None = None,
    ) -> None:
        self._lines = text.split("\n")
        self._file_name = file_name
        suffix = PurePath(file_name).suffix
        self._extension = suffix[1:].lower() if suffix else ""
        self._language_id = language_id or _LANGUAGE_BY_EXTENSION.get(
            self._extension, "plaintext"
        )

    @property
    def language_id(self) -> str:
        return self._language_id

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def file_extension(self) -> str:
        return self._extension

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self._lines):
            return self._lines[line]
        return ""

    def line_prefix(self, position: Position) -> str:
        return self.line_at(position.line)[: max(position.character, 0)]

    def line_suffix(self, position: Position) -> str:
        """Text after the cursor on the cursor line."""
        return self.line_at(position.line)[max(position.character, 0):]

    def full_text(self) -> str:
        return "\n".join(self._lines)

    @classmethod
    def with_cursor(
        cls, text: str, file_name: str = "untitled.txt", marker: str = "|",
        language_id: str | None = None,
    ) -> tuple[InMemoryDocument, Position]:
        """Build a document from text containing a single cursor marker."""
        index = text.index(marker)
        before = text[:index]
        line = before.count("\n")
        character = index - (before.rfind("\n") + 1)
        doc = cls(text[:index] + text[index + len(marker):], file_name, language_id)
        return doc, Position(line, character)
