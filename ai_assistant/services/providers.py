"""Provider port, error taxonomy and name-based provider registry."""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base class for failures raised by text generation providers."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class ProviderUnavailable(ProviderError):
    """Provider could not be reached in time (timeout or connection error)."""


class ProviderAuthError(ProviderError):
    """Provider rejected the configured credentials."""


class ProviderRateLimited(ProviderError):
    """Provider rate limit exceeded."""


class ProviderMalformedResponse(ProviderError):
    """Provider answered with a payload of unexpected shape."""


# System context prepended to every request, keyed by text kind.
SYSTEM_CONTEXTS = {
    "fitness": "You are a fitness expert analyzing workout data. Provide professional insights.",
    "health": "You are a health professional analyzing fitness data for wellness insights.",
    "motivation": "You are an enthusiastic fitness coach. Provide a motivational and encouraging response.",
}

# Transient conditions are expected in normal operation and logged as warnings.
TRANSIENT_PROVIDER_ERRORS = (ProviderUnavailable, ProviderRateLimited)


@runtime_checkable
class ProviderPort(Protocol):
    """Text generation capability used by the coaching services."""

    name: str

    async def get_fitness_text(self, prompt: str) -> str: ...

    async def get_health_text(self, prompt: str) -> str: ...

    async def get_motivation_text(self, prompt: str) -> str: ...


class ProviderRegistry:
    """Resolve provider names to registered adapters.

    Lookups are case-insensitive. Unknown names resolve to the first
    registered provider instead of failing, so a mistyped provider still
    yields a coaching response.
    """

    def __init__(self, default_provider: str | None = None) -> None:
        self._providers: dict[str, ProviderPort] = {}
        self.default_provider = default_provider

    def register(self, provider: ProviderPort) -> None:
        key = provider.name.lower()
        if key in self._providers:
            raise ValueError(f"Provider '{provider.name}' is already registered")
        self._providers[key] = provider
        logger.debug("Registered provider %s", provider.name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def names(self) -> list[str]:
        return [provider.name for provider in self._providers.values()]

    def resolve(self, name: str | None = None) -> ProviderPort:
        """Return the provider for ``name``, the default, or the first registered one."""

        if not self._providers:
            raise LookupError("No providers registered")

        requested = (name or "").strip() or (self.default_provider or "").strip()
        provider = self._providers.get(requested.lower())
        if provider is None:
            provider = next(iter(self._providers.values()))
            if requested:
                logger.info("Unknown provider '%s', using %s", requested, provider.name)
        return provider

    async def aclose(self) -> None:
        """Close every adapter that holds a client connection pool."""

        for provider in self._providers.values():
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()
