"""Trace listing service.

Fetches a job's artifacts, keeps the Playwright traces, applies the
free-text query and folds retries into groups. Shared by the API and
the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from circletrace.backend.logging import get_logger
from circletrace.core.artifact_selection import (
    build_viewer_url,
    is_allowed_artifact_url,
    normalize_project_slug,
    select_trace_artifacts,
    validate_job_number,
)
from circletrace.core.filtering import filter_artifacts
from circletrace.core.grouping import group_artifacts

if TYPE_CHECKING:
    from circletrace.core.models import ArtifactGroup, ArtifactRecord

logger = get_logger(__name__)


class ArtifactSourceProtocol(Protocol):
    """Protocol for anything that can list a job's artifacts."""

    async def list_artifacts(self, project: str, job: int | str) -> list[ArtifactRecord]:
        """List every artifact of a job."""
        ...


@dataclass
class TraceListing:
    """Trace artifacts of one job, filtered and grouped."""

    project: str
    job: str
    query: str
    artifacts: list[ArtifactRecord] = field(default_factory=list)
    traces: list[ArtifactRecord] = field(default_factory=list)
    groups: list[ArtifactGroup] = field(default_factory=list)
    total_traces: int = 0

    def viewer_urls(
        self, proxy_base: str | None = None, viewer_base: str | None = None
    ) -> dict[str, str]:
        """Map each group's primary artifact URL to its trace viewer link.

        Artifacts not hosted by CircleCI get no link.
        """
        kwargs = {"viewer_base": viewer_base} if viewer_base else {}
        return {
            group.primary.url: build_viewer_url(group.primary.url, proxy_base=proxy_base, **kwargs)
            for group in self.groups
            if is_allowed_artifact_url(group.primary.url)
        }


def build_listing(
    project: str, job: str, artifacts: list[ArtifactRecord], query: str = ""
) -> TraceListing:
    """Select, filter and group the trace artifacts of a job listing."""
    traces = select_trace_artifacts(artifacts)
    matched = filter_artifacts(traces, query)
    return TraceListing(
        project=project,
        job=job,
        query=query,
        artifacts=list(artifacts),
        traces=matched,
        groups=group_artifacts(matched),
        total_traces=len(traces),
    )


class TraceListingService:
    """Service for listing the Playwright traces of a CircleCI job."""

    def __init__(self, source: ArtifactSourceProtocol):
        """
        Initialize trace listing service.

        Args:
            source: Artifact source, usually a CircleCIArtifactClient.
        """
        self.source = source

    async def list_traces(self, project: str, job: int | str, query: str = "") -> TraceListing:
        """
        Fetch a job's artifacts and build its trace listing.

        Raises:
            InvalidProjectSlugError: If the project slug is malformed.
            InvalidJobNumberError: If the job number is not numeric.
            CircleCIAPIError: On upstream errors.
        """
        slug = normalize_project_slug(project)
        job_number = validate_job_number(job)

        artifacts = await self.source.list_artifacts(slug, job_number)
        listing = build_listing(slug, job_number, artifacts, query)

        logger.info(
            "artifacts_grouped",
            project=slug,
            job=job_number,
            artifacts=len(artifacts),
            traces=listing.total_traces,
            matched=len(listing.traces),
            groups=len(listing.groups),
        )
        return listing
