"""Main Typer CLI application for circletrace."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated

import typer
from rich.console import Console

from circletrace.backend.config import get_settings
from circletrace.backend.logging import configure_logging
from circletrace.backend.schemas import ArtifactListingResponse
from circletrace.backend.services.traces import TraceListingService
from circletrace.core.artifact_selection import build_viewer_url, parse_job_url
from circletrace.core.exceptions import CircleTraceError
from circletrace.core.path_parser import parse_trace_path
from circletrace.display import TraceDisplay
from circletrace.integrations.circleci_artifacts import CircleCIArtifactClient

app = typer.Typer(
    name="circletrace",
    help="Playwright traces from CircleCI jobs",
    no_args_is_help=True,
)

OUTPUT_FORMATS = ("text", "json")


def is_job_url(target: str) -> bool:
    """Check if target is a URL rather than a project slug."""
    return target.startswith(("http://", "https://"))


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of: {', '.join(OUTPUT_FORMATS)}")


def _error_display() -> TraceDisplay:
    return TraceDisplay(Console(stderr=True, highlight=False))


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option(
            "-v",
            "--verbose",
            help="Log API activity to stderr",
        ),
    ] = False,
) -> None:
    """Playwright traces from CircleCI jobs."""
    configure_logging(log_level="DEBUG" if verbose else "WARNING", json_format=False)


@app.command()
def traces(
    target: Annotated[
        str,
        typer.Argument(help="CircleCI job URL OR project slug (gh/org/repo)"),
    ],
    job: Annotated[
        str | None,
        typer.Argument(help="Job number (when TARGET is a project slug)"),
    ] = None,
    query: Annotated[
        str,
        typer.Option(
            "-q",
            "--query",
            help="Only show traces matching this text",
        ),
    ] = "",
    token: Annotated[
        str | None,
        typer.Option(
            "-t",
            "--token",
            help="CircleCI token (or set CIRCLECI_TOKEN)",
            envvar="CIRCLECI_TOKEN",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "-f",
            "--output-format",
            help="Output format (text, json)",
        ),
    ] = "text",
    proxy_base: Annotated[
        str | None,
        typer.Option(
            "--proxy-base",
            help="Origin of a CORS proxy serving /api/proxy",
        ),
    ] = None,
) -> None:
    """List the Playwright traces of a CircleCI job, grouped with their retries.

    TARGET can be:
    - A job URL: https://app.circleci.com/pipelines/github/org/repo/1/workflows/x/jobs/42
    - A project slug followed by the job number: gh/org/repo 42
    """
    _check_format(output_format)
    exit_code = asyncio.run(
        _list_traces(
            target=target,
            job=job,
            query=query,
            token=token,
            output_format=output_format,
            proxy_base=proxy_base,
        )
    )
    raise typer.Exit(code=exit_code)


async def _list_traces(
    target: str,
    job: str | None,
    query: str,
    token: str | None,
    output_format: str,
    proxy_base: str | None,
) -> int:
    """Fetch, filter and group the traces of a job, then print them."""
    settings = get_settings()
    errors = _error_display()

    try:
        if is_job_url(target):
            if job is not None:
                errors.show_error("JOB cannot be combined with a job URL")
                return 2
            project, job_number = parse_job_url(target)
        elif job is None:
            errors.show_error("JOB is required when TARGET is a project slug")
            return 2
        else:
            project, job_number = target, job

        client = CircleCIArtifactClient(
            token=token or settings.circleci_token,
            base_url=settings.circleci_api_url,
            timeout=settings.request_timeout,
            max_pages=settings.max_pages,
        )
        listing = await TraceListingService(source=client).list_traces(project, job_number, query)
    except CircleTraceError as e:
        errors.show_error(str(e))
        return 1

    viewer_urls = listing.viewer_urls(
        proxy_base=proxy_base or settings.proxy_base_url,
        viewer_base=settings.viewer_base_url,
    )
    if output_format == "json":
        response = ArtifactListingResponse.from_listing(listing, viewer_urls)
        typer.echo(json.dumps(response.model_dump(), indent=2))
    else:
        TraceDisplay().show_listing(listing, viewer_urls)
    return 0


@app.command()
def parse(
    paths: Annotated[
        list[str],
        typer.Argument(help="Artifact paths to parse"),
    ],
    output_format: Annotated[
        str,
        typer.Option(
            "-f",
            "--output-format",
            help="Output format (text, json)",
        ),
    ] = "text",
) -> None:
    """Show the test metadata recovered from artifact paths."""
    _check_format(output_format)

    if output_format == "json":
        payload = [{"path": path, **parse_trace_path(path).to_dict()} for path in paths]
        typer.echo(json.dumps(payload, indent=2))
        return

    display = TraceDisplay()
    for path in paths:
        display.show_trace_info(path, parse_trace_path(path))


@app.command("viewer-url")
def viewer_url(
    url: Annotated[
        str,
        typer.Argument(help="CircleCI trace artifact URL"),
    ],
    proxy_base: Annotated[
        str | None,
        typer.Option(
            "--proxy-base",
            help="Origin of a CORS proxy serving /api/proxy",
        ),
    ] = None,
) -> None:
    """Print the Playwright trace viewer link for a trace artifact."""
    settings = get_settings()
    try:
        link = build_viewer_url(
            url,
            proxy_base=proxy_base or settings.proxy_base_url,
            viewer_base=settings.viewer_base_url,
        )
    except CircleTraceError as e:
        _error_display().show_error(str(e))
        raise typer.Exit(code=1) from e
    typer.echo(link)


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Bind address (defaults to HOST setting)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", help="Bind port (defaults to PORT setting)"),
    ] = None,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "circletrace.backend.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Entry point for the Typer CLI."""
    app()
