"""Rich-based display of trace listings for the terminal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from circletrace.backend.services.traces import TraceListing
    from circletrace.core.models import ArtifactGroup, TraceInfo


def format_severity(severity: str | None) -> str:
    """Format severity for display (e.g., "1" -> "S1")."""
    return f"S{severity}" if severity else "—"


def format_retries(group: ArtifactGroup) -> str:
    """Format a group's retry count (e.g., 2 retries -> "×2")."""
    return f"×{len(group.retries)}" if group.retries else ""


class TraceDisplay:
    """Handles all console output for trace listings."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def show_listing(self, listing: TraceListing, viewer_urls: dict[str, str]) -> None:
        """Print the grouped traces of a job as a table."""
        header = f"[bold]{listing.project}[/bold] job [bold]{listing.job}[/bold]"
        if listing.query.strip():
            header += f"  [dim]filter: {escape(repr(listing.query))}[/dim]"
        self.console.print(header)
        self.console.print(
            f"{len(listing.traces)} of {listing.total_traces} traces, "
            f"{len(listing.groups)} tests"
        )
        self.console.print()

        if not listing.groups:
            self.console.print("[yellow]No trace artifacts found.[/yellow]")
            return

        table = Table(show_lines=False)
        table.add_column("Test", style="bold")
        table.add_column("Suite", style="cyan")
        table.add_column("Type")
        table.add_column("Sev.", justify="center")
        table.add_column("Retries", justify="right", style="yellow")
        table.add_column("Viewer", overflow="fold")

        for group in listing.groups:
            info = group.info
            table.add_row(
                escape(info.test_name),
                escape(info.test_suite or "—"),
                info.test_type or "—",
                format_severity(info.severity),
                format_retries(group),
                escape(viewer_urls.get(group.primary.url) or group.primary.url),
            )

        self.console.print(table)

    def show_trace_info(self, path: str, info: TraceInfo) -> None:
        """Print the metadata parsed from one path."""
        self.console.print(f"[dim]{escape(path)}[/dim]")
        self.console.print(f"  test:     [bold]{escape(info.test_name)}[/bold]")
        self.console.print(f"  suite:    {escape(info.test_suite or '—')}")
        self.console.print(f"  type:     {info.test_type or '—'}")
        self.console.print(f"  severity: {format_severity(info.severity)}")
        if info.is_retry:
            self.console.print(f"  retry:    [yellow]{info.retry_label}[/yellow]")
        self.console.print(f"  group:    {escape(info.group_key or '—')}")

    def show_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]Error:[/red] {escape(message)}")
