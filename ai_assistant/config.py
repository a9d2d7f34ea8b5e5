"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROFILES_PATH = Path(__file__).parent / "analysis_profiles.yaml"


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    default_provider: str = Field(
        default="Claude",
        description="Provider used when the caller does not name one.",
    )

    anthropic_api_key: str | None = None
    anthropic_model: str = Field(default="claude-sonnet-4-5-20250929")

    huggingface_api_key: str | None = None
    huggingface_model: str = Field(default="Meta-Llama-3.1-8B-Instruct")
    huggingface_url: str = Field(
        default="https://router.huggingface.co/sambanova/v1/chat/completions",
    )

    provider_timeout_seconds: float = Field(default=30.0, gt=0)
    max_output_tokens: int = Field(default=1000, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    analysis_profiles_path: Path = Field(
        default=DEFAULT_PROFILES_PATH,
        description="YAML file with per analysis type headers, prompts and fallback templates.",
    )

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = Field(default=True, description="Also write logs to LOG_DIR/ai_assistant.log.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("default_provider")
    @classmethod
    def validate_default_provider(cls, value: str) -> str:
        """Reject a blank default provider name."""

        if not value.strip():
            raise ValueError("DEFAULT_PROVIDER must not be empty.")
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
