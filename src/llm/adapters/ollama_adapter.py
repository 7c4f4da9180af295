# src/llm/adapters/ollama_adapter.py — v2
"""Ollama local LLM adapter implementing BaseLLMClient.

Uses the ollama Python SDK: single-shot chat, streamed chat and local model
listing.
"""

from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterator

from ollamacopilot.llm.base_client import BaseLLMClient
from ollamacopilot.llm.models import LLMResponse, Message, ModelInfo

logger = logging.getLogger(__name__)


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self, model: str = "", host: str = "http://localhost:11434", **kwargs: Any,
    ):
        super().__init__()
        self._model = model
        self._host = host

    @property
    def model(self) -> str:
        return self._model

    @property
    def host(self) -> str:
        return self._host

    def _client(self) -> Any:
        import ollama

        return ollama.AsyncClient(host=self._host)

    def _build_request(
        self,
        messages: list[Message],
        model: str | None,
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        msgs: list[dict[str, str]] = []
        if system:
            msgs.append({"role": "system", "content": system})
        for m in messages:
            msgs.append({"role": m.role, "content": m.content})

        options: dict[str, Any] = {
            "num_predict": max_tokens,
            "temperature": temperature,
        }
        return {"model": model or self._model, "messages": msgs, "options": options}

    async def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        kwargs = self._build_request(messages, model, system, max_tokens, temperature)
        client = self._client()

        t0 = time.monotonic()
        resp = await client.chat(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        return LLMResponse(
            content=resp["message"]["content"],
            input_tokens=resp.get("prompt_eval_count") or 0,
            output_tokens=resp.get("eval_count") or 0,
            model=kwargs["model"],
            provider="ollama",
            latency_ms=latency,
            raw_response=resp,
        )

    async def stream_chunks(
        self,
        messages: list[Message],
        model: str | None = None,
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> AsyncIterator[str]:
        kwargs = self._build_request(messages, model, system, max_tokens, temperature)
        client = self._client()

        parts = await client.chat(stream=True, **kwargs)
        async for part in parts:
            content = part["message"]["content"]
            if content:
                yield content

    async def list_models(self) -> list[ModelInfo]:
        """Locally pulled models with "family parameter_size" details."""
        client = self._client()
        resp = await client.list()

        models: list[ModelInfo] = []
        for entry in resp["models"]:
            name = entry.get("model") or entry.get("name") or ""
            details = entry.get("details")
            description = ""
            if details:
                family = details.get("family") or ""
                size = details.get("parameter_size") or ""
                description = f"{family} {size}".strip()
            models.append(ModelInfo(name=name, details=description))
        logger.debug("Listed %d Ollama models", len(models))
        return models

    @property
    def provider_name(self) -> str:
        return "ollama"
