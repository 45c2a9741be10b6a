"""Trace API routes."""

from traces.routes import cities, location, stats

__all__ = ["cities", "location", "stats"]
