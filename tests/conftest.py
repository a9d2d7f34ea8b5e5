"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
from datetime import datetime
from typing import Callable

import pytest
from fastapi.testclient import TestClient

os.environ["DEFAULT_PROVIDER"] = os.environ.get("DEFAULT_PROVIDER") or "Claude"
os.environ["ANTHROPIC_API_KEY"] = os.environ.get("ANTHROPIC_API_KEY") or "test-anthropic-key"
os.environ["HUGGINGFACE_API_KEY"] = os.environ.get("HUGGINGFACE_API_KEY") or "test-huggingface-key"

from ai_assistant.logging_config import configure_logging

configure_logging()

from ai_assistant.main import app
from ai_assistant.models.schemas import AnalysisRequest, WorkoutSample
from ai_assistant.services.providers import ProviderRegistry


class FakeProvider:
    """In-memory provider that records prompts and returns canned text."""

    def __init__(self, name: str, text: str = "", error: BaseException | None = None) -> None:
        self.name = name
        self.text = text
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def _respond(self, kind: str, prompt: str) -> str:
        self.calls.append((kind, prompt))
        if self.error is not None:
            raise self.error
        return self.text

    async def get_fitness_text(self, prompt: str) -> str:
        return await self._respond("fitness", prompt)

    async def get_health_text(self, prompt: str) -> str:
        return await self._respond("health", prompt)

    async def get_motivation_text(self, prompt: str) -> str:
        return await self._respond("motivation", prompt)


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    """Return the fake provider class so tests can build configured instances."""

    return FakeProvider


@pytest.fixture
def make_registry() -> Callable[..., ProviderRegistry]:
    """Build a registry from providers, in registration order."""

    def _build(*providers: FakeProvider, default: str | None = None) -> ProviderRegistry:
        registry = ProviderRegistry(default_provider=default)
        for provider in providers:
            registry.register(provider)
        return registry

    return _build


@pytest.fixture
def two_workouts() -> list[WorkoutSample]:
    """Two runs totalling 8000 m, 3000 s and 500 kcal."""

    return [
        WorkoutSample(
            date=datetime(2024, 5, 1, 7, 0),
            activity_type="Run",
            distance=5000,
            duration=1800,
            calories=300,
        ),
        WorkoutSample(
            date=datetime(2024, 5, 3, 7, 0),
            activity_type="Run",
            distance=3000,
            duration=1200,
            calories=200,
        ),
    ]


@pytest.fixture
def performance_request(two_workouts: list[WorkoutSample]) -> AnalysisRequest:
    return AnalysisRequest(recent_workouts=two_workouts, analysis_type="Performance")
