"""API routes for footprint statistics and trajectory."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from core.api import api_route
from core.auth import CurrentUserId
from db.schemas import StatsResponse, TrajectoryPoint, TrajectoryResponse
from traces.services import StatsService, TraceStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/traces/stats", response_model=StatsResponse)
@api_route(logger)
async def get_stats(user_id: CurrentUserId) -> StatsResponse:
    """Cities, provinces and tracking days for the current user."""
    stats = await StatsService.get_stats(user_id)
    return StatsResponse(stats=stats)


@router.get("/api/traces/trajectory", response_model=TrajectoryResponse)
@api_route(logger)
async def get_trajectory(
    user_id: CurrentUserId,
    startDate: Annotated[
        int | None,
        Query(ge=0, description="Inclusive start, epoch milliseconds"),
    ] = None,
    endDate: Annotated[
        int | None,
        Query(ge=0, description="Inclusive end, epoch milliseconds"),
    ] = None,
) -> TrajectoryResponse:
    """Samples in ascending timestamp order, optionally bounded."""
    points = await TraceStore.query_trajectory(user_id, startDate, endDate)
    logger.debug("Trajectory for user %s: %d points", user_id, len(points))
    return TrajectoryResponse(
        trajectory=[TrajectoryPoint.from_document(p) for p in points],
    )
