"""Logging setup for the coaching service and its provider clients."""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ai_assistant.config import get_settings

LOG_FILE_NAME = "ai_assistant.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party clients that log every HTTP request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic")

_configured = False


def build_logging_config(level: str, log_dir: Path | None) -> dict[str, Any]:
    """Return a ``dictConfig`` mapping; ``log_dir=None`` disables the file handler."""

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": level,
        },
    }
    if log_dir is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_dir / LOG_FILE_NAME),
            "encoding": "utf-8",
            "formatter": "standard",
            "level": level,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "loggers": {
            "ai_assistant": {"level": level},
            **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        },
        "root": {"level": level, "handlers": list(handlers)},
    }


def configure_logging(force: bool = False) -> None:
    """Configure logging once per process unless ``force`` is set."""

    global _configured
    if _configured and not force:
        return

    try:
        settings = get_settings()
        level = settings.log_level
        log_dir = settings.log_dir if settings.log_to_file else None
    except ValidationError:
        # Invalid environment; keep the service observable with defaults.
        level = "INFO"
        log_dir = Path("logs")

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(level, log_dir))
    _configured = True
