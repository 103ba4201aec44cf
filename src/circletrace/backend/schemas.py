"""Pydantic schemas for the circletrace API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from circletrace.backend.services.traces import TraceListing
    from circletrace.core.models import ArtifactGroup, ArtifactRecord, TraceInfo


class ArtifactSchema(BaseModel):
    """Single CircleCI artifact."""

    path: str
    url: str
    node_index: int = 0

    @classmethod
    def from_record(cls, record: ArtifactRecord) -> ArtifactSchema:
        return cls(path=record.path, url=record.url, node_index=record.node_index)


class TraceInfoSchema(BaseModel):
    """Metadata parsed from a trace path."""

    test_name: str
    test_suite: str | None = None
    test_type: str | None = None
    severity: str | None = None
    retry_label: str | None = None
    retry_number: int = 0
    file_name: str
    group_key: str

    @classmethod
    def from_info(cls, info: TraceInfo) -> TraceInfoSchema:
        return cls(**info.to_dict())


class ArtifactGroupSchema(BaseModel):
    """Original run of a test and its retries."""

    primary: ArtifactSchema
    retries: list[ArtifactSchema] = Field(default_factory=list)
    info: TraceInfoSchema
    viewer_url: str | None = Field(None, description="Trace viewer link for the primary run")

    @classmethod
    def from_group(cls, group: ArtifactGroup, viewer_url: str | None = None) -> ArtifactGroupSchema:
        return cls(
            primary=ArtifactSchema.from_record(group.primary),
            retries=[ArtifactSchema.from_record(record) for record in group.retries],
            info=TraceInfoSchema.from_info(group.info),
            viewer_url=viewer_url,
        )


class ArtifactListingResponse(BaseModel):
    """Response body for /api/artifacts."""

    project: str = Field(..., description="Normalized project slug (gh/org/repo)")
    job: str = Field(..., description="Job number")
    query: str = ""
    total_traces: int = Field(..., description="Trace artifacts before filtering")
    matched: int = Field(..., description="Trace artifacts matching the query")
    traces: list[ArtifactSchema] = Field(default_factory=list)
    groups: list[ArtifactGroupSchema] = Field(default_factory=list)
    all: list[ArtifactSchema] = Field(default_factory=list)

    @classmethod
    def from_listing(
        cls, listing: TraceListing, viewer_urls: dict[str, str] | None = None
    ) -> ArtifactListingResponse:
        viewer_urls = viewer_urls or {}
        return cls(
            project=listing.project,
            job=listing.job,
            query=listing.query,
            total_traces=listing.total_traces,
            matched=len(listing.traces),
            traces=[ArtifactSchema.from_record(record) for record in listing.traces],
            groups=[
                ArtifactGroupSchema.from_group(group, viewer_urls.get(group.primary.url))
                for group in listing.groups
            ],
            all=[ArtifactSchema.from_record(record) for record in listing.artifacts],
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
