"""Fold original test runs and their retries into logical groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from circletrace.core.models import ArtifactGroup
from circletrace.core.path_parser import parse_trace_path

if TYPE_CHECKING:
    from collections.abc import Iterable

    from circletrace.core.models import ArtifactRecord, TraceInfo


class _GroupBuilder:
    """Mutable accumulator for one group while records are folded in."""

    def __init__(self, position: int, record: ArtifactRecord, info: TraceInfo):
        self.position = position
        self.primary = record
        self.info = info
        self.retries: list[tuple[int, int, ArtifactRecord]] = []

    def add(self, position: int, record: ArtifactRecord, info: TraceInfo) -> None:
        if info.retry_number == 0 and self.info.is_retry:
            # The original arrived after one of its retries
            self.retries.append((self.info.retry_number, self.position, self.primary))
            self.position = position
            self.primary = record
            self.info = info
        else:
            self.retries.append((info.retry_number, position, record))

    def build(self) -> ArtifactGroup:
        # Ties on retry number keep input order
        ordered = sorted(self.retries, key=lambda item: (item[0], item[1]))
        return ArtifactGroup(
            primary=self.primary,
            info=self.info,
            retries=[record for _, _, record in ordered],
        )


def group_artifacts(records: Iterable[ArtifactRecord]) -> list[ArtifactGroup]:
    """Group artifact records by test, separating originals from retries.

    Groups are returned in the order their group key was first seen. Each
    input record ends up in exactly one group, either as the primary or
    among the retries, which are sorted by retry number.

    When a group has no original run, the first record seen stays primary.
    A second original in the same group is kept as a retry rather than
    replacing the first.

    Args:
        records: Artifact records, typically trace artifacts of one job.

    Returns:
        List of ArtifactGroup in first-encounter order.
    """
    builders: dict[str, _GroupBuilder] = {}

    for position, record in enumerate(records):
        info = parse_trace_path(record.path)
        builder = builders.get(info.group_key)
        if builder is None:
            builders[info.group_key] = _GroupBuilder(position, record, info)
        else:
            builder.add(position, record, info)

    return [builder.build() for builder in builders.values()]
