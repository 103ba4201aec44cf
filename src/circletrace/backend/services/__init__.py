"""Service layer for the circletrace backend."""

from circletrace.backend.services.traces import TraceListing, TraceListingService, build_listing

__all__ = ["TraceListing", "TraceListingService", "build_listing"]
