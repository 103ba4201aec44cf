"""API router for /artifacts endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from circletrace.backend.config import get_settings
from circletrace.backend.dependencies import get_trace_listing_service
from circletrace.backend.logging import get_logger
from circletrace.backend.schemas import ArtifactListingResponse
from circletrace.backend.services.traces import TraceListingService
from circletrace.core.exceptions import (
    CircleCIAPIError,
    InvalidJobNumberError,
    InvalidProjectSlugError,
    PaginationLimitError,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/artifacts", tags=["Artifacts"])


@router.get(
    "",
    response_model=ArtifactListingResponse,
    summary="List Playwright traces of a job",
    description="Fetch a CircleCI job's artifacts and return its Playwright traces, "
    "filtered by an optional query and grouped with their retries.",
)
async def list_artifacts(
    project: Annotated[str, Query(description="Project slug: gh/org/repo or github/org/repo")],
    job: Annotated[str, Query(description="Job number")],
    service: Annotated[TraceListingService, Depends(get_trace_listing_service)],
    q: Annotated[str, Query(description="Case-insensitive filter")] = "",
) -> ArtifactListingResponse:
    """
    List the trace artifacts of a CircleCI job.

    Raises:
        HTTPException: 400 for malformed identifiers, the upstream status
            (or 502) for CircleCI errors.
    """
    try:
        listing = await service.list_traces(project, job, q)
    except (InvalidProjectSlugError, InvalidJobNumberError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except CircleCIAPIError as e:
        logger.warning("circleci_api_error", status_code=e.status_code, error=e.message)
        raise HTTPException(
            status_code=e.status_code or status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        ) from e
    except PaginationLimitError as e:
        logger.warning("pagination_limit_exceeded", max_pages=e.max_pages)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    settings = get_settings()
    viewer_urls = listing.viewer_urls(
        proxy_base=settings.proxy_base_url,
        viewer_base=settings.viewer_base_url,
    )
    return ArtifactListingResponse.from_listing(listing, viewer_urls)
