# src/logging/context.py — v2
"""Contextual logging support: attach generation, language and file to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per completion request.
_generation: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "generation", default=None
)
_language_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "language_id", default=None
)
_file_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_name", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    generation: int | None = None
    language_id: str | None = None
    file_name: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        generation=_generation.get(),
        language_id=_language_id.get(),
        file_name=_file_name.get(),
    )


def set_request_context(generation: int, language_id: str, file_name: str) -> None:
    """Set request-level context (called once per completion trigger)."""
    _generation.set(generation)
    _language_id.set(language_id)
    _file_name.set(file_name)


def clear_context() -> None:
    """Reset all context variables."""
    _generation.set(None)
    _language_id.set(None)
    _file_name.set(None)
