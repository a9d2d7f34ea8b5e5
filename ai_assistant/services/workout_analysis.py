"""AI workout analysis with structured extraction and template fallback."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from ai_assistant.models.schemas import AnalysisRequest, AnalysisResult, WorkoutSample
from ai_assistant.services.analysis_profiles import (
    GENERIC_ANALYSIS_TYPE,
    AnalysisProfile,
    AnalysisProfileRegistry,
    get_profile_registry,
)
from ai_assistant.services.fallback import FallbackSynthesizer, resolve_athlete
from ai_assistant.services.providers import (
    TRANSIENT_PROVIDER_ERRORS,
    ProviderPort,
    ProviderRegistry,
)
from ai_assistant.services.text_extraction import extract_list, extract_section


logger = logging.getLogger(__name__)

NO_WORKOUTS_PROMPT = (
    "No recent workout data available for analysis. "
    "Please provide workout data to generate insights."
)


def format_clock(seconds: float) -> str:
    """Format seconds as ``hh:mm:ss``."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def describe_workout(workout: WorkoutSample) -> str:
    return (
        f"Date: {workout.date:%Y-%m-%d}, Type: {workout.activity_type or 'Unknown'}, "
        f"Distance: {workout.distance:.0f}m, Duration: {format_clock(workout.duration)}, "
        f"Calories: {workout.calories:.0f}"
    )


class WorkoutAnalysisService:
    """Analyzes recent workouts with a text generation provider.

    Provider failures never reach the caller: any exception raised by the
    provider, as well as a blank response, is answered with the fallback
    analysis for the requested analysis type. The returned result always
    carries the resolved provider name and a fresh ``generated_at``.
    """

    def __init__(
        self,
        providers: ProviderRegistry,
        profiles: AnalysisProfileRegistry | None = None,
        fallback: FallbackSynthesizer | None = None,
    ) -> None:
        self.providers = providers
        self.profiles = profiles or get_profile_registry()
        self.fallback = fallback or FallbackSynthesizer(self.profiles)

    async def analyze_workouts(
        self,
        request: AnalysisRequest,
        provider: str | None = None,
    ) -> AnalysisResult:
        """Analyze workouts with ``provider`` (or the configured default)."""

        adapter = self.providers.resolve(provider)
        profile = self.profiles.get(request.analysis_type)
        logger.info(
            "Analyzing %d workouts with %s, analysis type: %s",
            len(request.recent_workouts),
            adapter.name,
            profile.name,
        )

        prompt = self.build_prompt(request, profile)
        try:
            raw_text = await self._provider_call(adapter, profile)(prompt)
        except TRANSIENT_PROVIDER_ERRORS as exc:
            logger.warning("Workout analysis with %s unavailable: %s", adapter.name, exc)
            return self.fallback.synthesize_analysis(request, adapter.name)
        except Exception:
            logger.exception("Error analyzing workouts with %s", adapter.name)
            return self.fallback.synthesize_analysis(request, adapter.name)

        if not raw_text or not raw_text.strip():
            logger.warning("%s returned an empty analysis, using fallback", adapter.name)
            return self.fallback.synthesize_analysis(request, adapter.name)

        result = self.parse_response(raw_text, request, profile, adapter.name)
        logger.info(
            "Generated workout analysis with %s: %d insights and %d recommendations",
            adapter.name,
            len(result.key_insights or []),
            len(result.recommendations or []),
        )
        return result

    async def analyze_with_provider(self, request: AnalysisRequest, provider_name: str) -> AnalysisResult:
        """Analyze workouts with an explicitly named provider."""
        return await self.analyze_workouts(request, provider=provider_name)

    @staticmethod
    def _provider_call(adapter: ProviderPort, profile: AnalysisProfile) -> Callable[[str], Awaitable[str]]:
        if profile.provider_call == "health":
            return adapter.get_health_text
        return adapter.get_fitness_text

    def build_prompt(self, request: AnalysisRequest, profile: AnalysisProfile) -> str:
        if not request.recent_workouts:
            return NO_WORKOUTS_PROMPT

        workouts_data = "\n".join(describe_workout(w) for w in request.recent_workouts)
        athlete_context = ""
        if request.athlete_profile is not None:
            _, level, goal = resolve_athlete(request.athlete_profile)
            athlete_context = f"\nAthlete Level: {level}\nPrimary Goal: {goal}"

        focus = AnalysisProfileRegistry.normalize(request.analysis_type) or GENERIC_ANALYSIS_TYPE
        return profile.prompt.format(
            workouts_data=workouts_data,
            athlete_context=athlete_context,
            analysis_focus=focus,
        )

    def parse_response(
        self,
        raw_text: str,
        request: AnalysisRequest,
        profile: AnalysisProfile,
        provider_name: str,
    ) -> AnalysisResult:
        """Turn provider text into an analysis result.

        Missing insight or recommendation lists are filled from the profile's
        fallback templates so callers always receive both lists.
        """
        boundaries = self.profiles.boundary_headers
        insights = extract_list(raw_text, profile.insight_headers, boundaries)
        recommendations = extract_list(raw_text, profile.recommendation_headers, boundaries)

        if insights is None:
            logger.debug("No insights found in %s response, using %s templates", provider_name, profile.name)
            insights = self.fallback.fallback_insights(request)
        if recommendations is None:
            logger.debug("No recommendations found in %s response, using %s templates", provider_name, profile.name)
            recommendations = self.fallback.fallback_recommendations(request)

        return AnalysisResult(
            analysis=extract_section(raw_text, profile.analysis_headers, profile.stop_markers),
            key_insights=insights,
            recommendations=recommendations,
            provider=provider_name,
        )
