"""Analysis type registry backed by the packaged YAML profile table."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml

from ai_assistant.config import get_settings


logger = logging.getLogger(__name__)

GENERIC_ANALYSIS_TYPE = "general"
PROVIDER_CALLS = {"fitness", "health"}


@dataclass(frozen=True)
class AnalysisProfile:
    """Header vocabulary, prompt and fallback templates for one analysis type."""

    name: str
    provider_call: str
    analysis_headers: tuple[str, ...]
    stop_markers: tuple[str, ...]
    insight_headers: tuple[str, ...]
    recommendation_headers: tuple[str, ...]
    prompt: str
    fallback_analysis: str
    fallback_insights: tuple[str, ...]
    fallback_recommendations: tuple[str, ...]

    @classmethod
    def from_mapping(cls, name: str, raw: dict[str, Any]) -> "AnalysisProfile":
        provider_call = str(raw.get("provider_call", "fitness")).lower()
        if provider_call not in PROVIDER_CALLS:
            raise ValueError(f"Profile '{name}' has unknown provider_call '{provider_call}'")

        return cls(
            name=name,
            provider_call=provider_call,
            analysis_headers=tuple(raw["analysis_headers"]),
            stop_markers=tuple(raw["stop_markers"]),
            insight_headers=tuple(raw["insight_headers"]),
            recommendation_headers=tuple(raw["recommendation_headers"]),
            prompt=raw["prompt"],
            fallback_analysis=raw["fallback_analysis"],
            fallback_insights=tuple(raw["fallback_insights"]),
            fallback_recommendations=tuple(raw["fallback_recommendations"]),
        )

    @property
    def section_headers(self) -> tuple[str, ...]:
        """Every header this profile knows about, in declaration order."""
        return (
            self.analysis_headers
            + self.stop_markers
            + self.insight_headers
            + self.recommendation_headers
        )


class AnalysisProfileRegistry:
    """Maps lower-cased analysis type names to their profiles.

    ``boundary_headers`` are the headers that end a list section. Without an
    explicit list every header of every profile is used.
    """

    def __init__(
        self,
        profiles: dict[str, AnalysisProfile],
        boundary_headers: Sequence[str] | None = None,
    ) -> None:
        if GENERIC_ANALYSIS_TYPE not in profiles:
            raise ValueError(f"A '{GENERIC_ANALYSIS_TYPE}' profile is required")
        self._profiles = dict(profiles)

        if boundary_headers is None:
            boundary_headers = [
                header for profile in self._profiles.values() for header in profile.section_headers
            ]
        self._boundary_headers = tuple(dict.fromkeys(boundary_headers))

    @classmethod
    def from_yaml(cls, path: Path) -> "AnalysisProfileRegistry":
        with path.open("r", encoding="utf-8") as fh:
            document = yaml.safe_load(fh) or {}

        raw_profiles = document.get("profiles") or {}
        profiles = {
            str(name).lower(): AnalysisProfile.from_mapping(str(name).lower(), raw)
            for name, raw in raw_profiles.items()
        }
        logger.debug("Loaded %d analysis profiles from %s", len(profiles), path)
        return cls(profiles, document.get("boundary_headers"))

    @staticmethod
    def normalize(analysis_type: str | None) -> str:
        return (analysis_type or "").strip().lower()

    def get(self, analysis_type: str | None) -> AnalysisProfile:
        """Return the profile for an analysis type, or the generic one."""
        return self._profiles.get(self.normalize(analysis_type), self._profiles[GENERIC_ANALYSIS_TYPE])

    @property
    def names(self) -> list[str]:
        return list(self._profiles)

    @property
    def boundary_headers(self) -> tuple[str, ...]:
        return self._boundary_headers


@lru_cache()
def get_profile_registry() -> AnalysisProfileRegistry:
    """Load the configured profile table once per process."""

    return AnalysisProfileRegistry.from_yaml(get_settings().analysis_profiles_path)
