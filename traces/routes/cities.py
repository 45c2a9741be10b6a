"""API routes for visited cities."""

import logging

from fastapi import APIRouter

from core.api import api_route
from core.auth import CurrentUserId
from db.schemas import CityDetailResponse, CityListResponse, CityVisitResponse
from traces.services import CityService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/traces/cities", response_model=CityListResponse)
@api_route(logger)
async def list_cities(user_id: CurrentUserId) -> CityListResponse:
    """All visited cities, most recent first."""
    visits = await CityService.list_city_visits(user_id)
    return CityListResponse(
        cities=[CityVisitResponse.from_document(v) for v in visits],
    )


# Registered before /cities/{city_id} so "lighted" is not taken as an id
@router.get("/api/traces/cities/lighted", response_model=CityListResponse)
@api_route(logger)
async def list_lighted_cities(user_id: CurrentUserId) -> CityListResponse:
    """Lit cities only."""
    visits = await CityService.list_lighted_cities(user_id)
    return CityListResponse(
        cities=[CityVisitResponse.from_document(v) for v in visits],
    )


@router.get("/api/traces/cities/{city_id}", response_model=CityDetailResponse)
@api_route(logger)
async def get_city(city_id: str, user_id: CurrentUserId) -> CityDetailResponse:
    visit = await CityService.get_city_visit(user_id, city_id)
    return CityDetailResponse(city=CityVisitResponse.from_document(visit))
