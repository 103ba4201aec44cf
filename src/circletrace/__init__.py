"""circletrace - Playwright traces from CircleCI jobs."""

__version__ = "0.4.0"

from circletrace.core.filtering import filter_artifacts
from circletrace.core.grouping import group_artifacts
from circletrace.core.models import ArtifactGroup, ArtifactRecord, TraceInfo
from circletrace.core.path_parser import parse_trace_path

__all__ = [
    "ArtifactRecord",
    "TraceInfo",
    "ArtifactGroup",
    "parse_trace_path",
    "group_artifacts",
    "filter_artifacts",
]
