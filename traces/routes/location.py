"""API route for uploading location samples."""

import logging

from fastapi import APIRouter

from core.api import api_route
from core.auth import CurrentUserId
from db.schemas import (
    CityVisitResponse,
    IngestLocationResponse,
    LocationResponse,
    LocationSampleIn,
)
from traces.services import IngestionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/traces/location", response_model=IngestLocationResponse)
@api_route(logger)
async def upload_location(
    sample: LocationSampleIn,
    user_id: CurrentUserId,
) -> IngestLocationResponse:
    """Store a GPS sample and update the visited city."""
    point, visit = await IngestionService.ingest(user_id, sample)
    return IngestLocationResponse(
        location=LocationResponse.from_document(point),
        city=CityVisitResponse.from_document(visit),
    )
