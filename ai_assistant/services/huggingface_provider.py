"""HuggingFace inference router adapter (OpenAI compatible chat completions)."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ai_assistant.config import Settings, get_settings
from ai_assistant.services.providers import (
    ProviderAuthError,
    ProviderError,
    ProviderMalformedResponse,
    ProviderRateLimited,
    ProviderUnavailable,
    SYSTEM_CONTEXTS,
)


logger = logging.getLogger(__name__)


class HuggingFaceProvider:
    """Generates coaching text through a HuggingFace inference provider."""

    name = "HuggingFace"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.model = settings.huggingface_model
        self.url = settings.huggingface_url
        self.max_tokens = settings.max_output_tokens
        self.temperature = settings.temperature

        headers = {"Content-Type": "application/json"}
        if settings.huggingface_api_key:
            headers["Authorization"] = f"Bearer {settings.huggingface_api_key}"
        else:
            logger.warning("No HuggingFace API key configured - requests will likely be rejected")

        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.provider_timeout_seconds),
            headers=headers,
        )

    async def get_fitness_text(self, prompt: str) -> str:
        return await self._complete(prompt, "fitness")

    async def get_health_text(self, prompt: str) -> str:
        return await self._complete(prompt, "health")

    async def get_motivation_text(self, prompt: str) -> str:
        return await self._complete(prompt, "motivation")

    async def aclose(self) -> None:
        await self.client.aclose()

    def _build_payload(self, prompt: str, kind: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "user", "content": f"{SYSTEM_CONTEXTS[kind]}\n\n{prompt}"},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "stream": False,
        }

    async def _complete(self, prompt: str, kind: str) -> str:
        logger.info("Calling HuggingFace model %s for %s text", self.model, kind)
        try:
            response = await self.client.post(self.url, json=self._build_payload(prompt, kind))
        except httpx.TimeoutException as exc:
            raise ProviderUnavailable(self.name, "request timed out") from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(self.name, f"connection failed: {exc}") from exc

        self._raise_for_status(response)
        return self._parse_response(response)

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        logger.debug("HuggingFace error body: %s", response.text)
        if status in (401, 403):
            raise ProviderAuthError(self.name, "credentials rejected", status)
        if status == 429:
            raise ProviderRateLimited(self.name, "rate limit exceeded", status)
        raise ProviderError(self.name, f"HTTP {status}", status)

    def _parse_response(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderMalformedResponse(self.name, "response is not valid JSON") from exc

        try:
            text = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderMalformedResponse(self.name, "unexpected response shape") from exc

        if not isinstance(text, str):
            raise ProviderMalformedResponse(self.name, "message content is not text")

        logger.debug("Received %d characters from HuggingFace", len(text))
        return text.strip()
