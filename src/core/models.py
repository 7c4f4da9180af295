# src/core/models.py — v1
"""Core domain types: Position, FileCategory, ClassificationResult, PromptSpec."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class Position:
    """Zero-based cursor coordinates inside a document."""

    line: int
    character: int


class FileCategory(str, Enum):
    """Whole-file conventions derived from the file extension."""

    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    STRUCTURED_DATA = "structured_data"
    QUERY = "query"
    NONE = "none"


class ClassificationResult(BaseModel):
    """Independent lexical facts about the cursor position.

    Flags are not mutually exclusive: a string literal inside a log call
    inside an object literal reports all three.
    """

    model_config = ConfigDict(frozen=True)

    in_object_literal: bool = False
    in_log_call: bool = False
    in_string_literal: bool = False
    in_function_header: bool = False
    in_class_header: bool = False
    in_import: bool = False
    in_comment: bool = False
    in_control_structure_header: bool = False
    file_category: FileCategory = FileCategory.NONE

    @property
    def is_volatile(self) -> bool:
        """Whether cached suggestions must not be reused at this position."""
        return self.in_object_literal or self.in_log_call or self.in_string_literal


class PromptSpec(BaseModel):
    """Instruction plus context excerpt produced for a single request."""

    kind: str
    instruction_text: str
    context_excerpt: str

    def render(self) -> str:
        """Return the user-message text sent to the model."""
        return f"{self.instruction_text}\nContext:\n{self.context_excerpt}"
