# src/config/settings.py — v3
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for backend, completion and logging settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ollamacopilot.logging.logger import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM backend ===
    llm_provider: str = "ollama"
    ollama_base_url: str = "http://localhost:11434"
    # Empty means no model selected yet: completions are refused with a warning.
    ollama_default_model: str = ""

    # === Completion ===
    completion_debounce_ms: int = 200
    completion_cache_size: int = 100
    completion_cache_ttl_seconds: float = 300.0
    completion_stream: bool = True
    completion_temperature: float = 0.2
    completion_max_tokens: int = 256

    # === Context windows ===
    context_lines_before: int = 20
    context_lines_after: int = 5
    scan_window_lines: int = 50

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("completion_debounce_ms", "context_lines_before", "context_lines_after")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator(
        "completion_cache_size",
        "completion_cache_ttl_seconds",
        "completion_max_tokens",
        "scan_window_lines",
    )
    @classmethod
    def validate_positive(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("completion_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:  # noqa: N805
        if not 0.0 <= v <= 2.0:
            raise ValueError("completion_temperature must be between 0 and 2")
        return v

    @field_validator("log_rotation")
    @classmethod
    def validate_log_rotation(cls, v: str) -> str:  # noqa: N805
        parse_size(v)
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.context_lines_before > self.scan_window_lines:
            errors.append("CONTEXT_LINES_BEFORE must be <= SCAN_WINDOW_LINES")

        if not self.ollama_base_url.startswith(("http://", "https://")):
            errors.append("OLLAMA_BASE_URL must be an http(s) URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def debounce_seconds(self) -> float:
        return self.completion_debounce_ms / 1000

    @property
    def has_model(self) -> bool:
        return bool(self.ollama_default_model.strip())


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
