"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ai_assistant.dependencies import close_provider_registry
from ai_assistant.logging_config import configure_logging
from ai_assistant.routers import coach


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Release provider HTTP clients on shutdown."""
    yield
    await close_provider_registry()
    logger.info("Closed AI provider clients")


app = FastAPI(title="AI Coaching Assistant API", lifespan=lifespan)


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


app.include_router(coach.router)
