"""Domain models for CircleCI trace artifacts.

An ArtifactRecord is what the CircleCI API hands us. A TraceInfo is the
metadata recovered from the record's path, and an ArtifactGroup folds an
original run together with its retries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Closed vocabulary of test types recognised among path segments
TEST_TYPES = ("functional", "integration", "e2e", "unit", "smoke", "regression")

DEFAULT_FILE_NAME = "trace.zip"
DEFAULT_TEST_NAME = "Trace"


@dataclass(frozen=True)
class ArtifactRecord:
    """A single artifact produced by a CircleCI job."""

    path: str
    url: str = ""
    node_index: int = 0

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ArtifactRecord:
        """Build a record from a CircleCI v2 artifact item."""
        return cls(
            path=item.get("path") or "",
            url=item.get("url") or "",
            node_index=item.get("node_index") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"path": self.path, "url": self.url, "node_index": self.node_index}


@dataclass(frozen=True)
class TraceInfo:
    """Test metadata recovered from an artifact path."""

    test_name: str
    file_name: str
    group_key: str
    test_suite: str | None = None
    test_type: str | None = None
    severity: str | None = None
    retry_label: str | None = None
    retry_number: int = 0

    @property
    def is_retry(self) -> bool:
        """Whether this path belongs to a retried run."""
        return self.retry_number > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "test_name": self.test_name,
            "test_suite": self.test_suite,
            "test_type": self.test_type,
            "severity": self.severity,
            "retry_label": self.retry_label,
            "retry_number": self.retry_number,
            "file_name": self.file_name,
            "group_key": self.group_key,
        }


@dataclass
class ArtifactGroup:
    """An original run and its retries, folded by group key."""

    primary: ArtifactRecord
    info: TraceInfo
    retries: list[ArtifactRecord] = field(default_factory=list)

    @property
    def records(self) -> list[ArtifactRecord]:
        """Primary record followed by its retries."""
        return [self.primary, *self.retries]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "primary": self.primary.to_dict(),
            "retries": [record.to_dict() for record in self.retries],
            "info": self.info.to_dict(),
        }
