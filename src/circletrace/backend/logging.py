"""Structured logging for circletrace.

The CLI and the API share one structlog setup. Log lines go to stderr so
that ``circletrace traces -f json`` keeps stdout parseable. Request-scoped
fields (request ID, method, path) are carried in structlog's contextvars
and merged into every event logged while a request is handled.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

LOGGER_NAME_KEY = "logger"


def _rename_logger_name(logger: Any, method_name: str, event_dict: dict) -> dict:
    # get_logger() stores the name under a key structlog does not reserve
    name = event_dict.pop("logger_name", None)
    if name is not None:
        event_dict.setdefault(LOGGER_NAME_KEY, name)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging with structlog.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        json_format: Render JSON lines; otherwise structlog's console renderer.
        stream: Output stream (defaults to sys.stderr).
    """
    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)
    processors: list = [
        structlog.contextvars.merge_contextvars,
        _rename_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger tagged with ``name``.

    The returned proxy resolves the structlog configuration on each call, so
    module-level loggers follow a configure_logging() made after import.
    """
    return structlog.get_logger(logger_name=name)
