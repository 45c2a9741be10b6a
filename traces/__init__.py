"""
Location trace and city visit package.

The package is organized into:
- routes/: API endpoint handlers organized by domain
- services/: Ingestion, trace storage, visit aggregation and statistics
"""

from fastapi import APIRouter

from traces.routes import cities, location, stats

# Create main router that aggregates all trace-related routes
router = APIRouter()

router.include_router(location.router, tags=["traces-location"])
router.include_router(cities.router, tags=["traces-cities"])
router.include_router(stats.router, tags=["traces-stats"])

__all__ = ["router"]
