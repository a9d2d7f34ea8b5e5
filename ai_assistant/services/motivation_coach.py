"""Motivational coaching messages generated by AI providers."""
from __future__ import annotations

import logging

from ai_assistant.models.schemas import MotivationRequest, MotivationResult
from ai_assistant.services.fallback import FallbackSynthesizer, resolve_athlete
from ai_assistant.services.providers import TRANSIENT_PROVIDER_ERRORS, ProviderRegistry
from ai_assistant.services.text_extraction import extract_message, extract_quote, extract_tips
from ai_assistant.services.workout_analysis import format_clock


logger = logging.getLogger(__name__)


class MotivationCoachService:
    """Generates a motivational message, quote and tips for an athlete."""

    def __init__(
        self,
        providers: ProviderRegistry,
        fallback: FallbackSynthesizer | None = None,
    ) -> None:
        self.providers = providers
        self.fallback = fallback or FallbackSynthesizer()

    async def generate_motivation(
        self,
        request: MotivationRequest,
        provider: str | None = None,
    ) -> MotivationResult:
        """Return a motivational result; provider failures yield a template message."""

        adapter = self.providers.resolve(provider)
        name, _, _ = resolve_athlete(request.athlete_profile)
        logger.info("Generating motivational message for %s with %s", name, adapter.name)

        try:
            raw_text = await adapter.get_motivation_text(self.build_prompt(request))
        except TRANSIENT_PROVIDER_ERRORS as exc:
            logger.warning("Motivation with %s unavailable: %s", adapter.name, exc)
            return self.fallback.synthesize_motivation(request)
        except Exception:
            logger.exception("Error generating motivational message with %s", adapter.name)
            return self.fallback.synthesize_motivation(request)

        if not raw_text or not raw_text.strip():
            logger.warning("%s returned an empty motivation, using fallback", adapter.name)
            return self.fallback.synthesize_motivation(request)

        result = MotivationResult(
            motivational_message=extract_message(raw_text),
            quote=extract_quote(raw_text),
            actionable_tips=extract_tips(raw_text),
        )
        logger.info(
            "Generated motivational message with %d characters",
            len(result.motivational_message),
        )
        return result

    @staticmethod
    def build_prompt(request: MotivationRequest) -> str:
        name, level, goal = resolve_athlete(request.athlete_profile)

        workout = request.last_workout
        if workout is not None:
            last_workout = (
                f"Last workout: {workout.activity_type or 'Workout'}, "
                f"{workout.distance / 1000:.1f}km, {format_clock(workout.duration)}"
            )
        else:
            last_workout = "No recent workout data available"

        if request.is_struggling:
            motivation_level = "The athlete is currently struggling with motivation and needs extra encouragement."
        else:
            motivation_level = "The athlete is looking for additional motivation to stay on track."

        upcoming = ""
        if request.upcoming_workout_type:
            upcoming = f"\n- Upcoming workout: {request.upcoming_workout_type}"

        return (
            f"Create a motivational fitness message for {name}.\n\n"
            "Athlete Profile:\n"
            f"- Fitness Level: {level}\n"
            f"- Primary Goal: {goal}\n"
            f"- {last_workout}\n"
            f"- {motivation_level}{upcoming}\n\n"
            "Generate a motivational response with:\n"
            "1. Personal encouragement (2-3 sentences)\n"
            "2. An inspiring fitness quote\n"
            "3. 2-3 actionable tips\n\n"
            "Keep it positive, personal, and energizing!\n\n"
            "Response:"
        )
