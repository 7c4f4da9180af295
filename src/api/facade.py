# src/api/facade.py — v2
"""Public API facade: commands and one-shot completions.

Usage:
    from ollamacopilot.api.facade import complete_document
    item = await complete_document(document, position)
"""

from __future__ import annotations

import logging

from ollamacopilot.api.models import CommandResult, CompletionItem
from ollamacopilot.completion.orchestrator import (
    CACHE_CLEARED_MESSAGE,
    CompletionOrchestrator,
)
from ollamacopilot.config.settings import Settings
from ollamacopilot.context.classifier import classify
from ollamacopilot.context.helpers import get_file_context
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import Position, PromptSpec
from ollamacopilot.core.notifier import LoggingNotifier, Notifier
from ollamacopilot.llm.base_client import BaseLLMClient
from ollamacopilot.llm.client_factory import create_llm_client
from ollamacopilot.prompts.synthesizer import synthesize

logger = logging.getLogger(__name__)

NOT_INITIALIZED_MESSAGE = "Completion provider not initialized"


def clear_completion_cache(
    orchestrator: CompletionOrchestrator | None,
    notifier: Notifier | None = None,
) -> CommandResult:
    """Empty the completion cache and report the outcome to the user."""
    notifier = notifier or LoggingNotifier()
    if orchestrator is None:
        notifier.warning(NOT_INITIALIZED_MESSAGE)
        return CommandResult(success=False, message=NOT_INITIALIZED_MESSAGE)

    orchestrator.clear_cache()
    notifier.info(CACHE_CLEARED_MESSAGE)
    return CommandResult(success=True, message=CACHE_CLEARED_MESSAGE)


async def complete_document(
    document: TextDocument,
    position: Position,
    settings: Settings | None = None,
    llm_client: BaseLLMClient | None = None,
    notifier: Notifier | None = None,
) -> CompletionItem | None:
    """Run a single completion request with no debounce.

    Args:
        document: Document to complete.
        position: Cursor position.
        settings: Global settings. Loaded from .env if None.
        llm_client: Model client. Built from the settings if None.
        notifier: User message surface. Logs if None.

    Returns:
        The suggestion, or None when there is nothing to insert.
    """
    settings = settings or Settings()
    settings = settings.model_copy(update={"completion_debounce_ms": 0})
    llm_client = llm_client or create_llm_client(settings)

    orchestrator = CompletionOrchestrator(settings, llm_client, notifier=notifier)
    text = await orchestrator.provide_completion(document, position)
    if text is None:
        return None
    logger.info("Completion at %d:%d (%d chars)", position.line, position.character, len(text))
    return CompletionItem(insert_text=text, position=position)


def preview_prompt(
    document: TextDocument,
    position: Position,
    settings: Settings | None = None,
) -> PromptSpec:
    """Prompt that a completion at ``position`` would send, without calling a model."""
    settings = settings or Settings()
    classification = classify(document, position, settings.scan_window_lines)
    excerpt = get_file_context(
        document, position, settings.context_lines_before, settings.context_lines_after,
    )
    return synthesize(classification, document, position, excerpt)
