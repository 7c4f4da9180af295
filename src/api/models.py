# src/api/models.py — v2
"""API-level models: CommandResult, CompletionItem."""

from __future__ import annotations

from pydantic import BaseModel

from ollamacopilot.core.models import Position


class CommandResult(BaseModel):
    """Outcome of a user-invoked command, as reported to the invoking surface."""

    success: bool
    message: str


class CompletionItem(BaseModel):
    """A suggestion to insert at a cursor position."""

    insert_text: str
    position: Position
