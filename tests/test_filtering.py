"""Tests for free-text filtering of trace artifacts."""

from __future__ import annotations

import pytest

from circletrace.core.filtering import build_search_text, filter_artifacts
from circletrace.core.models import ArtifactRecord
from circletrace.core.path_parser import parse_trace_path
from tests.factories import AVATAR_PATH, CART_PATH, make_record, retry_path


class TestBuildSearchText:
    """Tests for build_search_text function."""

    def test_includes_parsed_fields_and_path(self):
        text = build_search_text(make_record(AVATAR_PATH))

        assert text == (
            "close avatar drop down menu settings/avatar.spec.ts s1 " + AVATAR_PATH.lower()
        )

    def test_includes_type_and_retry_label(self):
        record = make_record("test-results/smoke/login-flow-retry2/trace.zip")

        text = build_search_text(record)

        assert "smoke" in text.split()
        assert "retry2" in text.split()

    def test_skips_missing_fields(self):
        text = build_search_text(ArtifactRecord(path="trace.zip"))

        assert text == "trace trace.zip"

    def test_uses_given_info(self):
        record = make_record(AVATAR_PATH)

        assert build_search_text(record, parse_trace_path(record.path)) == build_search_text(
            record
        )


class TestFilterArtifacts:
    """Tests for filter_artifacts function."""

    @pytest.fixture
    def records(self) -> list[ArtifactRecord]:
        return [
            make_record(AVATAR_PATH),
            make_record(CART_PATH),
            make_record(retry_path(1)),
            make_record("test-results/login-flow/trace.zip"),
        ]

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_returns_everything(self, records, query):
        assert filter_artifacts(records, query) == records

    def test_severity_label_matches(self):
        records = [ArtifactRecord(path="x/severity-2-abcd-foo-bar/trace.zip")]

        assert filter_artifacts(records, "S2") == records
        assert filter_artifacts(records, "S3") == []

    def test_case_insensitive(self, records):
        assert filter_artifacts(records, "AVATAR") == [records[0], records[2]]

    def test_matches_suite(self, records):
        assert filter_artifacts(records, "checkout/cart.spec") == [records[1]]

    def test_matches_test_type(self, records):
        assert filter_artifacts(records, "e2e") == [records[1]]

    def test_matches_retry_label(self, records):
        assert filter_artifacts(records, "retry1") == [records[2]]

    def test_matches_title_with_spaces(self, records):
        assert filter_artifacts(records, "drop down") == [records[0], records[2]]

    def test_no_match(self, records):
        assert filter_artifacts(records, "does-not-exist") == []

    def test_query_is_not_tokenized(self, records):
        assert filter_artifacts(records, "menu avatar") == []

    def test_preserves_input_order(self, records):
        reversed_records = list(reversed(records))

        assert filter_artifacts(reversed_records, "avatar") == [records[2], records[0]]

    def test_chained_filters_match_both_queries(self, records):
        result = filter_artifacts(filter_artifacts(records, "severity"), "1")

        assert result
        for record in result:
            text = build_search_text(record)
            assert "severity" in text
            assert "1" in text

    def test_returns_new_list(self, records):
        result = filter_artifacts(records, "")

        assert result == records
        assert result is not records
