"""Trace services."""

from traces.services.city_service import CityService
from traces.services.ingestion_service import IngestionService
from traces.services.stats_service import StatsService
from traces.services.trace_store import TraceStore
from traces.services.visit_aggregator import (
    VisitAggregator,
    get_visit_aggregator,
    lighting_decision,
)

__all__ = [
    "CityService",
    "IngestionService",
    "StatsService",
    "TraceStore",
    "VisitAggregator",
    "get_visit_aggregator",
    "lighting_decision",
]
