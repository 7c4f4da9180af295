# src/completion/orchestrator.py — v2
"""Completion orchestrator: classify, cache, debounce, generate, normalize.

States: IDLE → (CACHE_HIT | DEBOUNCING → GENERATING) → DONE. The cache is
consulted first; only a miss waits out the debounce delay.

Cancellation first: every trigger cancels the previous request (its debounce
wait and its model call) and bumps the generation counter. Anything a
superseded request produces afterwards fails the liveness check and is
dropped, so only the newest trigger can ever emit a completion.
"""

from __future__ import annotations

import logging
from enum import Enum

from ollamacopilot.cache.completion_cache import CompletionCache
from ollamacopilot.cache.fingerprint import build_cache_key
from ollamacopilot.cache.invalidation import should_invalidate
from ollamacopilot.completion.request import InFlightRequest
from ollamacopilot.config.settings import Settings
from ollamacopilot.context.classifier import classify
from ollamacopilot.context.helpers import get_existing_properties, get_file_context
from ollamacopilot.core.document import TextDocument
from ollamacopilot.core.models import Position, PromptSpec
from ollamacopilot.core.notifier import LoggingNotifier, Notifier
from ollamacopilot.llm.base_client import BaseLLMClient
from ollamacopilot.llm.models import Message, RequestAborted
from ollamacopilot.llm.streaming import CompletionStream
from ollamacopilot.logging.context import set_request_context
from ollamacopilot.postproc.dedup import get_unique_completion
from ollamacopilot.postproc.normalizer import clean_response
from ollamacopilot.prompts.synthesizer import synthesize
from ollamacopilot.prompts.templates import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

NO_MODEL_MESSAGE = "No Ollama model selected. Set OLLAMA_DEFAULT_MODEL or select a model."
CACHE_CLEARED_MESSAGE = "Completion cache cleared"


class OrchestratorState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    CACHE_HIT = "cache_hit"
    GENERATING = "generating"
    DONE = "done"


class CompletionOrchestrator:
    """Owns at most one live completion request and the completion cache.

    Args:
        settings: Application settings (debounce, cache, model, windows).
        llm_client: Model client used for generation.
        cache: Completion cache; built from the settings when omitted.
        notifier: User message surface; logs when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        llm_client: BaseLLMClient,
        cache: CompletionCache | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._settings = settings
        self._client = llm_client
        self._cache = cache if cache is not None else CompletionCache(
            capacity=settings.completion_cache_size,
            ttl_seconds=settings.completion_cache_ttl_seconds,
        )
        self._notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self._model = settings.ollama_default_model.strip()
        self._generation = 0
        self._current: InFlightRequest | None = None
        self._state = OrchestratorState.IDLE

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def cache(self) -> CompletionCache:
        return self._cache

    @property
    def model(self) -> str:
        return self._model

    def set_model(self, model: str) -> None:
        """Switch models. Cached completions came from the old one and are dropped."""
        self._model = model.strip()
        self._cache.clear()
        logger.info("Selected model: %s", self._model or "<none>")

    def clear_cache(self, notify: bool = False) -> None:
        self._cache.clear()
        if notify:
            self._notifier.info(CACHE_CLEARED_MESSAGE)

    def cancel(self) -> None:
        """Cancel the live request, if any. Its late results will be discarded."""
        self._generation += 1
        if self._current is not None:
            logger.debug("Cancelling request #%d", self._current.generation)
            self._current.cancel()
            self._current = None
        self._state = OrchestratorState.IDLE

    def _is_live(self, request: InFlightRequest) -> bool:
        return request is self._current and not request.cancelled

    def _begin(self) -> InFlightRequest:
        self.cancel()
        request = InFlightRequest(self._generation)
        self._current = request
        return request

    def _finish(self, request: InFlightRequest) -> None:
        if self._is_live(request):
            self._current = None
            self._state = OrchestratorState.DONE

    async def provide_completion(
        self, document: TextDocument, position: Position,
    ) -> str | None:
        """Completion to insert at ``position``, or None when there is nothing to show.

        Never raises for cancellation, adapter failures or odd input; only the
        caller's own task cancellation propagates.
        """
        request = self._begin()
        set_request_context(request.generation, document.language_id, document.file_name)
        try:
            return await self._run(request, document, position)
        finally:
            self._finish(request)

    async def _run(
        self, request: InFlightRequest, document: TextDocument, position: Position,
    ) -> str | None:
        settings = self._settings
        classification = classify(document, position, settings.scan_window_lines)
        line_prefix = document.line_prefix(position)

        cache_key: str | None = None
        if not classification.is_volatile:
            cache_key = build_cache_key(document, position, classification)
            entry = self._cache.get(cache_key)
            if entry is not None and not should_invalidate(
                entry, document, position, classification
            ):
                self._state = OrchestratorState.CACHE_HIT
                logger.debug("Cache hit for request #%d", request.generation)
                return get_unique_completion(entry.completion, line_prefix, classification)
        else:
            logger.debug("Volatile context, bypassing cache")

        self._state = OrchestratorState.DEBOUNCING
        if not await request.wait_debounce(settings.debounce_seconds):
            logger.debug("Request #%d superseded during debounce", request.generation)
            return None
        if not self._is_live(request):
            return None

        if not self._model:
            self._notifier.warning(NO_MODEL_MESSAGE)
            return None

        existing = (
            get_existing_properties(document, position, settings.scan_window_lines)
            if classification.in_object_literal else []
        )
        excerpt = get_file_context(
            document, position, settings.context_lines_before, settings.context_lines_after,
        )
        prompt = synthesize(classification, document, position, excerpt)

        self._state = OrchestratorState.GENERATING
        try:
            raw = await self._generate(request, prompt)
        except RequestAborted:
            logger.debug("Request #%d aborted", request.generation)
            return None
        except Exception as exc:
            if not self._is_live(request):
                return None
            logger.warning("Completion request failed: %s", exc, exc_info=True)
            self._notifier.warning(f"Completion failed: {exc}")
            return None

        if not self._is_live(request):
            logger.debug("Discarding stale result of request #%d", request.generation)
            return None

        cleaned = clean_response(raw, classification, line_prefix, existing)
        if not cleaned:
            return None
        if cache_key is not None:
            self._cache.put(cache_key, cleaned, line_prefix)
        return get_unique_completion(cleaned, line_prefix, classification)

    async def _generate(self, request: InFlightRequest, prompt: PromptSpec) -> str:
        result = await self._client.chat(
            [Message(role="user", content=prompt.render())],
            model=self._model,
            system=SYSTEM_PROMPT,
            stream=self._settings.completion_stream,
            max_tokens=self._settings.completion_max_tokens,
            temperature=self._settings.completion_temperature,
            on_call=lambda call: request.attach_call(self._client, call),
        )
        if isinstance(result, CompletionStream):
            request.attach_stream(result)
            try:
                return await result.collect()
            finally:
                await result.aclose()
        return result
