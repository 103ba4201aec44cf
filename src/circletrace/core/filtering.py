"""Free-text filtering of trace artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from circletrace.core.path_parser import parse_trace_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from circletrace.core.models import ArtifactRecord, TraceInfo


def build_search_text(record: ArtifactRecord, info: TraceInfo | None = None) -> str:
    """Build the lower-cased text a query is matched against.

    Combines test name, suite, type, severity (as "S<n>"), retry label
    and the raw path, skipping fields that were not parsed.
    """
    if info is None:
        info = parse_trace_path(record.path)

    parts = [
        info.test_name,
        info.test_suite,
        info.test_type,
        f"S{info.severity}" if info.severity else None,
        info.retry_label,
        record.path,
    ]
    return " ".join(part for part in parts if part).lower()


def filter_artifacts(records: Sequence[ArtifactRecord], query: str) -> list[ArtifactRecord]:
    """Keep records whose search text contains the query.

    Matching is a case-insensitive substring test. An empty or
    whitespace-only query returns every record.

    Args:
        records: Records to filter.
        query: Free-text query.

    Returns:
        Matching records in their original order.
    """
    if not query.strip():
        return list(records)

    needle = query.lower()
    return [record for record in records if needle in build_search_text(record)]
