"""Pydantic models describing coaching requests and results."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ATHLETE_NAME = "Champion"
DEFAULT_FITNESS_LEVEL = "Beginner"
DEFAULT_PRIMARY_GOAL = "General Fitness"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AthleteProfile(BaseModel):
    """Athlete context used to personalise prompts and fallback messages."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    fitness_level: str | None = None
    primary_goal: str | None = None


class WorkoutSample(BaseModel):
    """Single recorded workout. Distance in meters, duration in seconds."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    activity_type: str | None = None
    distance: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    calories: float = Field(default=0.0, ge=0)


class MotivationRequest(BaseModel):
    """Input for a motivational message."""

    model_config = ConfigDict(frozen=True)

    athlete_profile: AthleteProfile | None = None
    last_workout: WorkoutSample | None = None
    is_struggling: bool = False
    upcoming_workout_type: str | None = None


class MotivationResult(BaseModel):
    """Motivational message with optional quote and tips."""

    model_config = ConfigDict(frozen=True)

    motivational_message: str = Field(min_length=1, max_length=300)
    quote: str | None = None
    actionable_tips: list[str] | None = Field(default=None, max_length=3)
    generated_at: datetime = Field(default_factory=utc_now)


class AnalysisRequest(BaseModel):
    """Input for a workout analysis."""

    model_config = ConfigDict(frozen=True)

    athlete_profile: AthleteProfile | None = None
    recent_workouts: list[WorkoutSample] = Field(default_factory=list)
    analysis_type: str | None = None


class AnalysisResult(BaseModel):
    """Structured workout analysis returned to callers."""

    model_config = ConfigDict(frozen=True)

    analysis: str = Field(min_length=20, max_length=400)
    key_insights: list[str] | None = Field(default=None, max_length=5)
    recommendations: list[str] | None = Field(default=None, max_length=5)
    provider: str = "Unknown"
    generated_at: datetime = Field(default_factory=utc_now)
