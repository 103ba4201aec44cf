"""Recover test metadata from Playwright trace artifact paths.

Playwright writes each test's output to a directory named after the spec
file and the test title, for example::

    settings/avatar-severity-1-5148f-close-avatar-drop-down-menu-local/trace.zip
    settings/avatar-severity-1-5148f-close-avatar-drop-down-menu-local-retry1/trace.zip

The naming convention is lossy, so parsing is best-effort: any path yields a
TraceInfo, falling back to generic labels when the convention is not met.
"""

from __future__ import annotations

import re

from circletrace.core.models import (
    DEFAULT_FILE_NAME,
    DEFAULT_TEST_NAME,
    TEST_TYPES,
    TraceInfo,
)

# Longer digit runs are not treated as a retry counter
_RETRY_SUFFIX = re.compile(r"[-_](retry(\d{1,18}))\Z", re.IGNORECASE | re.ASCII)
_SEVERITY = re.compile(r"severity-(\d+)", re.IGNORECASE)
_SEVERITY_BOUNDARY = re.compile(r"(?:^|[-_])severity[-_]", re.IGNORECASE)
# severity-<n>-<short hash>-<test title>
_HASHED_TITLE = re.compile(r"severity-\d+-[0-9a-f]{4,6}-(.+)$", re.IGNORECASE)
_LOCAL_SUFFIX = re.compile(r"[-_]local$", re.IGNORECASE)
_SEPARATORS = re.compile(r"[-_]+")
_WORD_START = re.compile(r"\b\w")

MIN_TEST_NAME_LENGTH = 3


def title_case(text: str) -> str:
    """Turn a slug into a title.

    Examples:
        "close-avatar-drop-down-menu" -> "Close Avatar Drop Down Menu"
        "sign_in__flow" -> "Sign In Flow"
    """
    spaced = _SEPARATORS.sub(" ", text)
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced).strip()


def _split_segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part and part not in (".", "..")]


def _find_test_type(segments: list[str]) -> str | None:
    for segment in segments:
        lowered = segment.lower()
        if lowered in TEST_TYPES:
            return lowered
    return None


def _strip_retry(last_dir: str) -> tuple[str, str | None, int]:
    """Split a trailing -retryN suffix off the test directory.

    Returns:
        Tuple of (directory without suffix, retry label, retry number).
    """
    match = _RETRY_SUFFIX.search(last_dir)
    if not match:
        return last_dir, None, 0
    return last_dir[: match.start()], match.group(1), int(match.group(2))


def _suite_from_prefix(test_part: str, parent_dir: str | None) -> str | None:
    """Build "<dir>/<file>.spec.ts" from the text preceding the severity marker.

    Only the last hyphen token becomes the file stem; everything before it
    is kept hyphen-joined as the directory. A lone token takes the enclosing
    directory, when there is one, as its directory.

    Examples:
        "settings-avatar-severity-1-..." -> "settings/avatar.spec.ts"
        "a-b-c-severity-1-..." -> "a-b/c.spec.ts"
        "avatar-severity-1-..." under "settings/" -> "settings/avatar.spec.ts"
    """
    boundary = _SEVERITY_BOUNDARY.search(test_part)
    if not boundary:
        return None

    tokens = [token for token in test_part[: boundary.start()].split("-") if token]
    if not tokens:
        return None
    if len(tokens) > 1:
        return f"{'-'.join(tokens[:-1])}/{tokens[-1]}.spec.ts"
    if parent_dir:
        return f"{parent_dir}/{tokens[0]}.spec.ts"
    return f"{tokens[0]}.spec.ts"


def _raw_test_name(test_part: str) -> str | None:
    match = _HASHED_TITLE.search(test_part)
    if not match:
        return None
    return _LOCAL_SUFFIX.sub("", match.group(1))


def parse_trace_path(path: str) -> TraceInfo:
    """Parse an artifact path into TraceInfo.

    Never raises. The result depends only on ``path``, so the same path
    always parses to an equal TraceInfo.

    Args:
        path: Slash-separated artifact path as reported by CircleCI.

    Returns:
        Parsed TraceInfo.
    """
    segments = _split_segments(path)
    file_name = segments.pop() if segments else DEFAULT_FILE_NAME
    test_type = _find_test_type(segments)
    last_dir = segments[-1] if segments else ""

    test_part, retry_label, retry_number = _strip_retry(last_dir)

    test_suite = None
    severity = None
    raw_name = None
    severity_match = _SEVERITY.search(test_part)
    if severity_match:
        severity = severity_match.group(1)
        parent_dir = segments[-2] if len(segments) > 1 else None
        test_suite = _suite_from_prefix(test_part, parent_dir)
        raw_name = _raw_test_name(test_part)

    test_name = title_case(raw_name if raw_name is not None else last_dir)
    if len(test_name) < MIN_TEST_NAME_LENGTH:
        test_name = title_case(last_dir) or DEFAULT_TEST_NAME

    return TraceInfo(
        test_name=test_name,
        file_name=file_name,
        group_key=test_part.lower(),
        test_suite=test_suite,
        test_type=test_type,
        severity=severity,
        retry_label=retry_label,
        retry_number=retry_number,
    )
