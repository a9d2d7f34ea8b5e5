"""Claude text generation adapter."""
from __future__ import annotations

import logging

import anthropic
from anthropic import AsyncAnthropic

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


class ClaudeProvider:
    """Generates coaching text with the Anthropic Messages API."""

    name = "Claude"

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.model = settings.anthropic_model
        self.max_tokens = settings.max_output_tokens
        self.temperature = settings.temperature
        self.client: AsyncAnthropic | None = None

        if settings.anthropic_api_key:
            self.client = AsyncAnthropic(
                api_key=settings.anthropic_api_key,
                timeout=settings.provider_timeout_seconds,
            )
        else:
            logger.warning("No Anthropic API key configured - Claude requests will use fallbacks")

    async def get_fitness_text(self, prompt: str) -> str:
        return await self._complete(prompt, "fitness")

    async def get_health_text(self, prompt: str) -> str:
        return await self._complete(prompt, "health")

    async def get_motivation_text(self, prompt: str) -> str:
        return await self._complete(prompt, "motivation")

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.close()

    async def _complete(self, prompt: str, kind: str) -> str:
        if self.client is None:
            raise ProviderAuthError(self.name, "API key not configured")

        logger.info("Calling Claude model %s for %s text", self.model, kind)
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_CONTEXTS[kind],
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as exc:
            raise ProviderUnavailable(self.name, "request timed out") from exc
        except anthropic.APIConnectionError as exc:
            raise ProviderUnavailable(self.name, f"connection failed: {exc}") from exc
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            raise ProviderAuthError(self.name, "credentials rejected", exc.status_code) from exc
        except anthropic.RateLimitError as exc:
            raise ProviderRateLimited(self.name, "rate limit exceeded", exc.status_code) from exc
        except anthropic.APIStatusError as exc:
            raise ProviderError(self.name, f"HTTP {exc.status_code}", exc.status_code) from exc

        return self._parse_response(response)

    def _parse_response(self, response: object) -> str:
        content = getattr(response, "content", None)
        if not content:
            raise ProviderMalformedResponse(self.name, "response has no content blocks")

        text = getattr(content[0], "text", None)
        if not isinstance(text, str):
            raise ProviderMalformedResponse(self.name, "first content block has no text")

        logger.debug("Received %d characters from Claude", len(text))
        return text.strip()
