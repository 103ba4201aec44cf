"""FastAPI application for circletrace."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from circletrace import __version__
from circletrace.backend.logging import configure_logging, get_logger
from circletrace.backend.middleware import RequestLoggingMiddleware
from circletrace.backend.routers import artifacts
from circletrace.backend.schemas import HealthResponse

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# API prefix
API_PREFIX = "/api"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    from circletrace.backend.config import get_settings

    settings = get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json_format,
    )
    logger.info("app_started", version=__version__)

    yield

    logger.info("app_shutdown")


app = FastAPI(
    title="circletrace API",
    description="Playwright traces from CircleCI jobs",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)  # type: ignore[arg-type]

app.include_router(artifacts.router, prefix=API_PREFIX)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Health status of the API.
    """
    return HealthResponse(status="healthy", version=__version__)
