"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest
import structlog

from circletrace.core.models import ArtifactRecord
from tests.factories import make_job_artifacts


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires network access)",
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (require network access)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def job_artifacts() -> list[ArtifactRecord]:
    """Artifacts of a job with two tests, one retried twice, plus non-trace files."""
    return make_job_artifacts()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings so environment changes apply per test."""
    from circletrace.backend.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls so streams from one test do not leak into the next."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
