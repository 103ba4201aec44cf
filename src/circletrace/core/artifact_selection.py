"""Artifact selection and CircleCI identifier handling.

This module picks Playwright trace archives out of a job's artifact list,
validates the project/job identifiers used to ask CircleCI for that list,
and builds trace viewer links for the selected archives.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import quote, urlparse

from circletrace.core.exceptions import (
    DisallowedArtifactUrlError,
    InvalidJobNumberError,
    InvalidJobUrlError,
    InvalidProjectSlugError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from circletrace.core.models import ArtifactRecord

TRACE_MARKERS = ("trace", "playwright")

ALLOWED_ARTIFACT_HOSTS = (
    "output.circle-artifacts.com",
    "circleci.com",
)

DEFAULT_VIEWER_URL = "https://trace.playwright.dev/"

# Characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

_PROJECT_SLUG = re.compile(r"gh/[\w-]+/[\w-]+", re.ASCII)
_JOB_NUMBER = re.compile(r"\d+", re.ASCII)

# https://app.circleci.com/pipelines/github/org/repo/123/workflows/<id>/jobs/456
_PIPELINE_JOB_PATH = re.compile(
    r"^/pipelines/(?:github|gh)/([\w-]+)/([\w-]+)/.*/jobs/(\d+)/?$", re.ASCII
)
# https://circleci.com/gh/org/repo/456
_LEGACY_JOB_PATH = re.compile(r"^/(?:github|gh)/([\w-]+)/([\w-]+)/(\d+)/?$", re.ASCII)


def is_trace_artifact(path: str) -> bool:
    """Check if artifact path looks like a Playwright trace archive."""
    return path.endswith(".zip") and any(marker in path for marker in TRACE_MARKERS)


def select_trace_artifacts(records: Iterable[ArtifactRecord]) -> list[ArtifactRecord]:
    """Keep only trace archives, preserving order."""
    return [record for record in records if is_trace_artifact(record.path)]


def normalize_project_slug(project: str) -> str:
    """Normalize a CircleCI project slug to the gh/org/repo form.

    Examples:
        "github/mozilla/fxa" -> "gh/mozilla/fxa"
        "gh/mozilla/fxa" -> "gh/mozilla/fxa"

    Raises:
        InvalidProjectSlugError: If the slug is not a GitHub project slug.
    """
    slug = re.sub(r"^github/", "gh/", project)
    if not _PROJECT_SLUG.fullmatch(slug):
        raise InvalidProjectSlugError(project)
    return slug


def validate_job_number(job: int | str) -> str:
    """Return the job number as a string.

    Raises:
        InvalidJobNumberError: If the job number is not a non-negative integer.
    """
    if isinstance(job, bool):
        raise InvalidJobNumberError(job)
    text = str(job)
    if not _JOB_NUMBER.fullmatch(text):
        raise InvalidJobNumberError(job)
    return text


def parse_job_url(url: str) -> tuple[str, str]:
    """Extract project slug and job number from a CircleCI job URL.

    Supports both the app URL and the legacy URL:
        https://app.circleci.com/pipelines/github/org/repo/12/workflows/ab-cd/jobs/345
        https://circleci.com/gh/org/repo/345

    Returns:
        Tuple of (project slug, job number).

    Raises:
        InvalidJobUrlError: If the URL does not point at a CircleCI job.
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError as e:
        raise InvalidJobUrlError(url) from e
    host = (parsed.hostname or "").lower()
    if not _host_allowed(host, ("circleci.com",)):
        raise InvalidJobUrlError(url)

    match = _PIPELINE_JOB_PATH.match(parsed.path) or _LEGACY_JOB_PATH.match(parsed.path)
    if not match:
        raise InvalidJobUrlError(url)

    org, repo, job = match.groups()
    return f"gh/{org}/{repo}", job


def _host_allowed(host: str, allowed: tuple[str, ...]) -> bool:
    return any(host == allowed_host or host.endswith(f".{allowed_host}") for allowed_host in allowed)


def is_allowed_artifact_url(url: str) -> bool:
    """Check if URL is hosted by CircleCI."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    return _host_allowed((parsed.hostname or "").lower(), ALLOWED_ARTIFACT_HOSTS)


def build_viewer_url(
    trace_url: str,
    proxy_base: str | None = None,
    viewer_base: str = DEFAULT_VIEWER_URL,
) -> str:
    """Build a Playwright trace viewer link for a trace archive.

    Args:
        trace_url: CircleCI artifact URL of the trace archive.
        proxy_base: Origin of a CORS proxy serving /api/proxy, if the viewer
            cannot fetch the artifact directly.
        viewer_base: Trace viewer location.

    Returns:
        Viewer URL with the (optionally proxied) trace URL as ?trace=.

    Raises:
        DisallowedArtifactUrlError: If trace_url is not a CircleCI URL.
    """
    if not is_allowed_artifact_url(trace_url):
        raise DisallowedArtifactUrlError(trace_url, ALLOWED_ARTIFACT_HOSTS)

    target = trace_url
    if proxy_base:
        encoded = quote(trace_url, safe=_URI_COMPONENT_SAFE)
        target = f"{proxy_base.rstrip('/')}/api/proxy?url={encoded}"

    return f"{viewer_base}?trace={quote(target, safe=_URI_COMPONENT_SAFE)}"
