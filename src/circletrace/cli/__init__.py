"""CLI package for circletrace."""

from circletrace.cli.app import app, main

__all__ = ["app", "main"]
