# src/core/notifier.py — v1
"""User-visible message surface (information and soft warnings)."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Where the host shows short messages to the user."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: routes user messages to the log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)
