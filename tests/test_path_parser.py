"""Tests for trace path parsing."""

from __future__ import annotations

import pytest

from circletrace.core.models import DEFAULT_FILE_NAME, DEFAULT_TEST_NAME
from circletrace.core.path_parser import parse_trace_path, title_case
from tests.factories import AVATAR_DIR, AVATAR_PATH, retry_path


class TestTitleCase:
    """Tests for title_case function."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("close-avatar-drop-down-menu", "Close Avatar Drop Down Menu"),
            ("sign_in__flow", "Sign In Flow"),
            ("--hello--", "Hello"),
            ("already Titled", "Already Titled"),
            ("step-2-of-3", "Step 2 Of 3"),
            ("", ""),
        ],
    )
    def test_title_case(self, text: str, expected: str) -> None:
        assert title_case(text) == expected


class TestConventionalPaths:
    """Paths following the severity/hash naming convention."""

    def test_original_run(self):
        """The reference example parses into suite, severity and title."""
        info = parse_trace_path(AVATAR_PATH)

        assert info.test_suite == "settings/avatar.spec.ts"
        assert info.severity == "1"
        assert info.test_name == "Close Avatar Drop Down Menu"
        assert info.retry_number == 0
        assert info.retry_label is None
        assert info.file_name == "trace.zip"
        assert info.group_key == AVATAR_DIR
        assert info.test_type is None

    def test_retry_run_shares_group_key(self):
        """A -retry1 directory is the same logical test as the original."""
        original = parse_trace_path(retry_path(0))
        retry = parse_trace_path(retry_path(1))

        assert retry.retry_label == "retry1"
        assert retry.retry_number == 1
        assert retry.is_retry
        assert retry.group_key == original.group_key
        assert retry.test_name == original.test_name
        assert retry.test_suite == original.test_suite

    def test_retry_suffix_case_preserved_in_label(self):
        info = parse_trace_path(f"settings/{AVATAR_DIR}_RETRY12/trace.zip")

        assert info.retry_label == "RETRY12"
        assert info.retry_number == 12
        assert info.group_key == AVATAR_DIR

    def test_retry_without_separator_is_not_a_retry(self):
        info = parse_trace_path("tests/loginretry1/trace.zip")

        assert info.retry_number == 0
        assert info.retry_label is None
        assert info.group_key == "loginretry1"

    def test_multi_token_prefix_splits_into_dir_and_stem(self):
        info = parse_trace_path("test-results/checkout-cart-severity-2-a1b2c-add-item/trace.zip")

        assert info.test_suite == "checkout/cart.spec.ts"
        assert info.test_name == "Add Item"

    def test_only_last_token_becomes_file_stem(self):
        info = parse_trace_path("a-b-c-severity-1-abcd-do-thing/trace.zip")

        assert info.test_suite == "a-b/c.spec.ts"

    def test_single_token_without_parent(self):
        info = parse_trace_path("cart_severity-3-abc12-add-item_local/trace.zip")

        assert info.test_suite == "cart.spec.ts"
        assert info.severity == "3"
        assert info.test_name == "Add Item"

    def test_severity_is_case_insensitive(self):
        info = parse_trace_path("login-SEVERITY-4-ffff0-Sign-In/trace.zip")

        assert info.severity == "4"
        assert info.test_suite == "login.spec.ts"
        assert info.test_name == "Sign In"
        assert info.group_key == "login-severity-4-ffff0-sign-in"

    def test_severity_at_start_has_no_suite(self):
        info = parse_trace_path("x/severity-2-abcd-foo-bar/trace.zip")

        assert info.severity == "2"
        assert info.test_suite is None
        assert info.test_name == "Foo Bar"


class TestFallbacks:
    """Paths that do not follow the naming convention."""

    def test_bare_file_name(self):
        info = parse_trace_path("trace.zip")

        assert info.file_name == "trace.zip"
        assert info.test_suite is None
        assert info.test_type is None
        assert info.severity is None
        assert info.test_name == DEFAULT_TEST_NAME
        assert info.group_key == ""

    @pytest.mark.parametrize("path", ["", "/", "./../.", "//"])
    def test_no_real_segments(self, path: str):
        info = parse_trace_path(path)

        assert info.file_name == DEFAULT_FILE_NAME
        assert info.test_name == DEFAULT_TEST_NAME
        assert info.group_key == ""

    def test_dot_segments_are_ignored(self):
        info = parse_trace_path("./results/../login-flow/./trace.zip/")

        assert info.file_name == "trace.zip"
        assert info.group_key == "login-flow"
        assert info.test_name == "Login Flow"

    def test_without_severity_uses_directory_name(self):
        info = parse_trace_path("test-results/login-flow/trace.zip")

        assert info.test_name == "Login Flow"
        assert info.test_suite is None
        assert info.severity is None

    def test_fallback_name_keeps_retry_suffix(self):
        info = parse_trace_path("test-results/login-flow-retry1/trace.zip")

        assert info.test_name == "Login Flow Retry1"
        assert info.group_key == "login-flow"
        assert info.retry_number == 1

    def test_severity_without_hashed_title(self):
        """Severity without a hash-prefixed title falls back to the directory."""
        info = parse_trace_path("checkout-payment-severity-2-pay/trace.zip")

        assert info.severity == "2"
        assert info.test_suite == "checkout/payment.spec.ts"
        assert info.test_name == "Checkout Payment Severity 2 Pay"

    def test_short_title_falls_back_to_directory(self):
        info = parse_trace_path("x-severity-1-abcd-ab/trace.zip")

        assert info.test_name == "X Severity 1 Abcd Ab"

    def test_short_directory_is_still_used(self):
        info = parse_trace_path("x/ab/trace.zip")

        assert info.test_name == "Ab"

    def test_overlong_retry_counter_is_not_a_retry(self):
        last_dir = "login-retry" + "1" * 5000
        info = parse_trace_path(f"settings/{last_dir}/trace.zip")

        assert info.retry_number == 0
        assert info.retry_label is None
        assert info.group_key == last_dir

    def test_longest_accepted_retry_counter(self):
        info = parse_trace_path("settings/login-retry" + "9" * 18 + "/trace.zip")

        assert info.retry_number == 10**18 - 1
        assert info.group_key == "login"

    def test_trailing_newline_is_not_stripped_as_retry(self):
        info = parse_trace_path("settings/login-retry1\n/trace.zip")

        assert info.retry_number == 0


class TestTestType:
    """Detection of the test type among directories."""

    def test_detects_type_case_insensitively(self):
        info = parse_trace_path("test-results/E2E/login-flow/trace.zip")

        assert info.test_type == "e2e"

    def test_first_match_wins(self):
        info = parse_trace_path("unit/smoke/login-flow/trace.zip")

        assert info.test_type == "unit"

    def test_requires_exact_segment(self):
        info = parse_trace_path("e2e-tests/login-flow/trace.zip")

        assert info.test_type is None

    def test_file_name_is_not_scanned(self):
        info = parse_trace_path("results/smoke")

        assert info.file_name == "smoke"
        assert info.test_type is None


class TestDeterminism:
    def test_same_path_parses_equal(self):
        assert parse_trace_path(retry_path(2)) == parse_trace_path(retry_path(2))
