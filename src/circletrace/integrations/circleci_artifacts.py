"""CircleCI Artifacts client for listing Playwright traces of a job.

This module provides functionality to:
- List every artifact of a CircleCI job (following pagination)
- Narrow the listing down to Playwright trace archives
"""

from __future__ import annotations

from typing import Any

import httpx

from circletrace.backend.logging import get_logger
from circletrace.core.artifact_selection import (
    normalize_project_slug,
    select_trace_artifacts,
    validate_job_number,
)
from circletrace.core.exceptions import CircleCIAPIError, PaginationLimitError
from circletrace.core.models import ArtifactRecord

__all__ = ["CircleCIAPIError", "CircleCIArtifactClient"]  # Re-export for callers

logger = get_logger(__name__)

DEFAULT_API_URL = "https://circleci.com/api/v2"
DEFAULT_MAX_PAGES = 20


class CircleCIArtifactClient:
    """Client for fetching job artifacts from CircleCI.

    Usage:
        client = CircleCIArtifactClient(token="circle-token")
        records = await client.list_trace_artifacts("gh/mozilla/fxa", 12345)
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        """Initialize the client.

        Args:
            token: CircleCI personal API token, needed for private projects only
            base_url: CircleCI v2 API root
            timeout: Request timeout in seconds
            max_pages: Upper bound on pages followed per listing
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_pages = max_pages
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Circle-Token"] = token

    async def _request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a GET request to the CircleCI API.

        Args:
            endpoint: API endpoint (e.g., /project/gh/org/repo/123/artifacts)
            params: Query parameters

        Returns:
            JSON response as dictionary

        Raises:
            CircleCIAPIError: On API errors
        """
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(
                    url,
                    headers=self._headers,
                    params=params,
                    timeout=self.timeout,
                )
            except httpx.RequestError as e:
                raise CircleCIAPIError(f"Request failed: {e}") from e

        if response.status_code == 404:
            raise CircleCIAPIError(
                "Job not found. The job may have expired or the URL is incorrect.",
                status_code=404,
            )
        elif response.status_code in (401, 403):
            raise CircleCIAPIError(
                "Unauthorized - set a CircleCI token for private projects",
                status_code=response.status_code,
            )
        elif response.status_code >= 400:
            raise CircleCIAPIError(
                f"CircleCI API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CircleCIAPIError("Invalid JSON in CircleCI response") from e
        if not isinstance(data, dict):
            raise CircleCIAPIError("Unexpected CircleCI response: expected a JSON object")
        return data

    async def list_artifacts(self, project: str, job: int | str) -> list[ArtifactRecord]:
        """List every artifact of a job.

        Args:
            project: Project slug (gh/org/repo or github/org/repo)
            job: Job number

        Returns:
            List of ArtifactRecord in the order CircleCI returns them

        Raises:
            InvalidProjectSlugError: If the project slug is malformed
            InvalidJobNumberError: If the job number is not numeric
            CircleCIAPIError: On API errors
            PaginationLimitError: If the listing exceeds max_pages
        """
        slug = normalize_project_slug(project)
        job_number = validate_job_number(job)
        endpoint = f"/project/{slug}/{job_number}/artifacts"

        records: list[ArtifactRecord] = []
        page_token: str | None = None
        for _ in range(self.max_pages):
            params = {"page-token": page_token} if page_token else None
            data = await self._request(endpoint, params=params)
            items = data.get("items") or []
            if not isinstance(items, list):
                raise CircleCIAPIError("Unexpected CircleCI response: items is not a list")
            records.extend(ArtifactRecord.from_api(item) for item in items if isinstance(item, dict))

            page_token = data.get("next_page_token")
            if not page_token:
                logger.info(
                    "artifacts_fetched",
                    project=slug,
                    job=job_number,
                    count=len(records),
                )
                return records

        raise PaginationLimitError(self.max_pages)

    async def list_trace_artifacts(self, project: str, job: int | str) -> list[ArtifactRecord]:
        """List only the Playwright trace archives of a job."""
        return select_trace_artifacts(await self.list_artifacts(project, job))
