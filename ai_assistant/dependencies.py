"""Service wiring shared by the API routers."""
from __future__ import annotations

from functools import lru_cache

from ai_assistant.config import Settings, get_settings
from ai_assistant.services.claude_provider import ClaudeProvider
from ai_assistant.services.huggingface_provider import HuggingFaceProvider
from ai_assistant.services.motivation_coach import MotivationCoachService
from ai_assistant.services.providers import ProviderRegistry
from ai_assistant.services.workout_analysis import WorkoutAnalysisService


def build_provider_registry(settings: Settings) -> ProviderRegistry:
    """Register every available provider adapter; the first is the fallback choice."""

    registry = ProviderRegistry(default_provider=settings.default_provider)
    registry.register(ClaudeProvider(settings))
    registry.register(HuggingFaceProvider(settings))
    return registry


@lru_cache()
def get_provider_registry() -> ProviderRegistry:
    return build_provider_registry(get_settings())


def get_workout_analysis_service() -> WorkoutAnalysisService:
    return WorkoutAnalysisService(get_provider_registry())


def get_motivation_coach_service() -> MotivationCoachService:
    return MotivationCoachService(get_provider_registry())


async def close_provider_registry() -> None:
    """Close the cached provider adapters, if they were ever built."""

    if get_provider_registry.cache_info().currsize:
        await get_provider_registry().aclose()
        get_provider_registry.cache_clear()
