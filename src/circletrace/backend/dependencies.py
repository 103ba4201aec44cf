"""FastAPI dependency injection for the circletrace service."""

from __future__ import annotations

from typing import Annotated

from fastapi import Query

from circletrace.backend.config import get_settings
from circletrace.backend.services.traces import TraceListingService
from circletrace.integrations.circleci_artifacts import CircleCIArtifactClient


def get_trace_listing_service(
    token: Annotated[
        str | None,
        Query(description="CircleCI token for private projects"),
    ] = None,
) -> TraceListingService:
    """
    Get a trace listing service backed by the CircleCI API.

    A token passed with the request takes precedence over CIRCLECI_TOKEN.
    """
    settings = get_settings()
    client = CircleCIArtifactClient(
        token=token or settings.circleci_token,
        base_url=settings.circleci_api_url,
        timeout=settings.request_timeout,
        max_pages=settings.max_pages,
    )
    return TraceListingService(source=client)
