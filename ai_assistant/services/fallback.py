"""Template based coaching results used when no usable AI text is available."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Sequence

from ai_assistant.models.schemas import (
    DEFAULT_ATHLETE_NAME,
    DEFAULT_FITNESS_LEVEL,
    DEFAULT_PRIMARY_GOAL,
    AnalysisRequest,
    AnalysisResult,
    AthleteProfile,
    MotivationRequest,
    MotivationResult,
    WorkoutSample,
)
from ai_assistant.services.analysis_profiles import (
    GENERIC_ANALYSIS_TYPE,
    AnalysisProfile,
    AnalysisProfileRegistry,
    get_profile_registry,
)
from ai_assistant.services.text_extraction import (
    MAX_ANALYSIS_LENGTH,
    MAX_ANALYSIS_SENTENCES,
    MAX_MESSAGE_LENGTH,
    MAX_MESSAGE_SENTENCES,
    bound_text,
)


logger = logging.getLogger(__name__)

FALLBACK_QUOTE = '"Success is the sum of small efforts repeated day in and day out." - Robert Collier'

FALLBACK_TIPS = (
    "Set small, achievable goals for today",
    "Focus on consistency over perfection",
    "Celebrate every small victory",
)

MOTIVATION_TEMPLATES = (
    "Great job, {name}! Your consistency in training is inspiring. "
    "Every workout brings you closer to your {goal}.",
    "You're making excellent progress, {name}! Your dedication to fitness shows "
    "real commitment to your health and goals.",
    "Keep pushing forward, {name}! Your {level} level shows you have what it takes "
    "to achieve great things.",
    "Amazing work, {name}! Your commitment to {goal} is paying off. "
    "Stay strong and keep moving forward!",
)


def format_duration(seconds: float) -> str:
    """Format seconds as ``h:mm``."""
    total_minutes = int(seconds) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}:{minutes:02d}"


@dataclass(frozen=True)
class WorkoutStats:
    """Aggregates over a list of workouts."""

    count: int
    total_distance: float
    total_duration: float
    avg_calories: float

    @classmethod
    def from_workouts(cls, workouts: Sequence[WorkoutSample]) -> "WorkoutStats":
        count = len(workouts)
        return cls(
            count=count,
            total_distance=sum(w.distance for w in workouts),
            total_duration=sum(w.duration for w in workouts),
            avg_calories=sum(w.calories for w in workouts) / count if count else 0.0,
        )

    @property
    def avg_duration(self) -> float:
        return self.total_duration / self.count if self.count else 0.0

    def template_fields(self, analysis_focus: str) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_distance": self.total_distance,
            "total_duration": format_duration(self.total_duration),
            "avg_duration": format_duration(self.avg_duration),
            "avg_calories": self.avg_calories,
            "analysis_focus": analysis_focus,
        }


def resolve_athlete(profile: AthleteProfile | None) -> tuple[str, str, str]:
    """Return ``(name, fitness_level, primary_goal)`` with defaults applied."""
    profile = profile or AthleteProfile()
    return (
        profile.name or DEFAULT_ATHLETE_NAME,
        profile.fitness_level or DEFAULT_FITNESS_LEVEL,
        profile.primary_goal or DEFAULT_PRIMARY_GOAL,
    )


class FallbackSynthesizer:
    """Builds structured results purely from request data.

    Analysis results are fully deterministic for a given request. Motivation
    messages are drawn from a small template set using ``rng`` so wording
    varies between calls; pass a seeded ``random.Random`` to make it
    repeatable.
    """

    def __init__(
        self,
        profiles: AnalysisProfileRegistry | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.profiles = profiles or get_profile_registry()
        self.rng = rng or random.Random()

    def _analysis_context(self, request: AnalysisRequest) -> tuple[AnalysisProfile, dict[str, Any]]:
        profile = self.profiles.get(request.analysis_type)
        focus = AnalysisProfileRegistry.normalize(request.analysis_type) or GENERIC_ANALYSIS_TYPE
        stats = WorkoutStats.from_workouts(request.recent_workouts)
        return profile, stats.template_fields(focus)

    def fallback_insights(self, request: AnalysisRequest) -> list[str]:
        profile, fields = self._analysis_context(request)
        return [template.format(**fields) for template in profile.fallback_insights]

    def fallback_recommendations(self, request: AnalysisRequest) -> list[str]:
        profile, fields = self._analysis_context(request)
        return [template.format(**fields) for template in profile.fallback_recommendations]

    def synthesize_analysis(self, request: AnalysisRequest, provider_name: str) -> AnalysisResult:
        profile, fields = self._analysis_context(request)
        analysis = bound_text(
            profile.fallback_analysis.format(**fields),
            MAX_ANALYSIS_LENGTH,
            MAX_ANALYSIS_SENTENCES,
        )
        logger.info(
            "Synthesized %s fallback analysis from %d workouts for %s",
            profile.name,
            fields["count"],
            provider_name,
        )
        return AnalysisResult(
            analysis=analysis,
            key_insights=[template.format(**fields) for template in profile.fallback_insights],
            recommendations=[template.format(**fields) for template in profile.fallback_recommendations],
            provider=provider_name,
        )

    def synthesize_motivation(self, request: MotivationRequest) -> MotivationResult:
        name, level, goal = resolve_athlete(request.athlete_profile)
        template = self.rng.choice(MOTIVATION_TEMPLATES)
        message = bound_text(
            template.format(name=name, level=level, goal=goal),
            MAX_MESSAGE_LENGTH,
            MAX_MESSAGE_SENTENCES,
        )
        return MotivationResult(
            motivational_message=message,
            quote=FALLBACK_QUOTE,
            actionable_tips=list(FALLBACK_TIPS),
        )
