# src/context/file_types.py — v1
"""File category detection from the file extension."""

from __future__ import annotations

from ollamacopilot.core.models import FileCategory

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "mdx"})
HTML_EXTENSIONS = frozenset({"html", "htm", "xhtml"})
STYLESHEET_EXTENSIONS = frozenset({"css", "scss", "sass", "less"})
STRUCTURED_DATA_EXTENSIONS = frozenset({"json", "jsonc", "json5"})
QUERY_EXTENSIONS = frozenset({"sql", "psql", "mysql", "pgsql"})


def _normalize(extension: str) -> str:
    return extension.lower().lstrip(".")


def is_markdown(extension: str) -> bool:
    return _normalize(extension) in MARKDOWN_EXTENSIONS


def is_html(extension: str) -> bool:
    return _normalize(extension) in HTML_EXTENSIONS


def file_category(extension: str) -> FileCategory:
    """Map an extension (with or without the dot) to its FileCategory."""
    ext = _normalize(extension)
    if is_markdown(ext) or is_html(ext):
        return FileCategory.MARKUP
    if ext in STYLESHEET_EXTENSIONS:
        return FileCategory.STYLESHEET
    if ext in STRUCTURED_DATA_EXTENSIONS:
        return FileCategory.STRUCTURED_DATA
    if ext in QUERY_EXTENSIONS:
        return FileCategory.QUERY
    return FileCategory.NONE
