"""Shared exceptions for the circletrace package.

The parsing, grouping and filtering functions never raise; these errors
come from identifier validation, configuration and the CircleCI client.
"""


class CircleTraceError(Exception):
    """Base exception for all circletrace errors."""


class InvalidProjectSlugError(CircleTraceError):
    """Project is not of the form gh/org/repo or github/org/repo."""

    def __init__(self, project: str) -> None:
        self.project = project
        super().__init__(
            f"Invalid project format: {project!r}. Expected: gh/org/repo or github/org/repo"
        )


class InvalidJobNumberError(CircleTraceError):
    """Job number is not numeric."""

    def __init__(self, job: object) -> None:
        self.job = job
        super().__init__(f"Invalid job number: {job!r}. Expected a numeric value.")


class InvalidJobUrlError(CircleTraceError):
    """URL does not point at a CircleCI job."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Not a CircleCI job URL: {url}")


class DisallowedArtifactUrlError(CircleTraceError):
    """Artifact URL is not hosted by CircleCI."""

    def __init__(self, url: str, allowed_hosts: tuple[str, ...]) -> None:
        self.url = url
        self.allowed_hosts = allowed_hosts
        super().__init__(
            f"Only CircleCI artifact URLs are allowed ({', '.join(allowed_hosts)}): {url}"
        )


class CircleCIAPIError(CircleTraceError):
    """Exception raised for CircleCI API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.status_code:
            return f"CircleCI API Error ({self.status_code}): {self.message}"
        return f"CircleCI API Error: {self.message}"


class PaginationLimitError(CircleTraceError):
    """Exceeded maximum page limit while listing artifacts."""

    def __init__(self, max_pages: int) -> None:
        self.max_pages = max_pages
        super().__init__(f"Artifact listing exceeded {max_pages} pages")
