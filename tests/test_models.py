"""Tests for domain models."""

from __future__ import annotations

import dataclasses

import pytest

from circletrace.core.models import ArtifactGroup, ArtifactRecord, TraceInfo


class TestArtifactRecord:
    def test_from_api(self):
        record = ArtifactRecord.from_api(
            {
                "path": "test-results/login-flow/trace.zip",
                "node_index": 3,
                "url": "https://output.circle-artifacts.com/output/job/x/artifacts/3/trace.zip",
            }
        )

        assert record.path == "test-results/login-flow/trace.zip"
        assert record.node_index == 3
        assert record.url.endswith("/3/trace.zip")

    def test_from_api_defaults(self):
        record = ArtifactRecord.from_api({"path": "trace.zip", "node_index": None})

        assert record.url == ""
        assert record.node_index == 0

    def test_is_immutable(self):
        record = ArtifactRecord(path="trace.zip")

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.path = "other.zip"  # type: ignore[misc]

    def test_to_dict_round_trips_through_from_api(self):
        record = ArtifactRecord(path="a/trace.zip", url="https://circleci.com/a", node_index=1)

        assert ArtifactRecord.from_api(record.to_dict()) == record


class TestTraceInfo:
    def test_is_retry(self):
        info = TraceInfo(test_name="Login", file_name="trace.zip", group_key="login")

        assert not info.is_retry
        assert dataclasses.replace(info, retry_number=2).is_retry

    def test_to_dict_has_all_fields(self):
        info = TraceInfo(test_name="Login", file_name="trace.zip", group_key="login")

        assert set(info.to_dict()) == {f.name for f in dataclasses.fields(TraceInfo)}


class TestArtifactGroup:
    def test_records_lists_primary_first(self):
        primary = ArtifactRecord(path="login/trace.zip")
        retry = ArtifactRecord(path="login-retry1/trace.zip")
        info = TraceInfo(test_name="Login", file_name="trace.zip", group_key="login")

        group = ArtifactGroup(primary=primary, info=info, retries=[retry])

        assert group.records == [primary, retry]
