"""API endpoints for AI coaching content."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ai_assistant.dependencies import get_motivation_coach_service, get_workout_analysis_service
from ai_assistant.models.schemas import (
    AnalysisRequest,
    AnalysisResult,
    MotivationRequest,
    MotivationResult,
)
from ai_assistant.services.motivation_coach import MotivationCoachService
from ai_assistant.services.workout_analysis import WorkoutAnalysisService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["coaching"])


@router.post("/workout-analysis", response_model=AnalysisResult)
async def analyze_workouts(
    payload: AnalysisRequest,
    provider: str | None = None,
    service: WorkoutAnalysisService = Depends(get_workout_analysis_service),
) -> AnalysisResult:
    """
    Analyze recent workouts with the requested (or default) AI provider.

    Always answers with a complete analysis; provider failures are replaced
    by a template analysis built from the workout statistics.
    """

    logger.info(
        "Handling workout analysis request | workouts=%d type=%s provider=%s",
        len(payload.recent_workouts),
        payload.analysis_type or "general",
        provider or "default",
    )
    return await service.analyze_workouts(payload, provider=provider)


@router.post("/workout-analysis/{provider_name}", response_model=AnalysisResult)
async def analyze_workouts_with_provider(
    provider_name: str,
    payload: AnalysisRequest,
    service: WorkoutAnalysisService = Depends(get_workout_analysis_service),
) -> AnalysisResult:
    """Analyze recent workouts with a provider named in the path."""

    return await service.analyze_with_provider(payload, provider_name)


@router.post("/motivation", response_model=MotivationResult)
async def generate_motivation(
    payload: MotivationRequest,
    provider: str | None = None,
    service: MotivationCoachService = Depends(get_motivation_coach_service),
) -> MotivationResult:
    """Generate a motivational message, quote and tips for an athlete."""

    logger.info("Handling motivation request | struggling=%s provider=%s", payload.is_struggling, provider or "default")
    return await service.generate_motivation(payload, provider=provider)
