"""Ingestion pipeline for a single location sample.

1. Drop platform "unknown" markers (negative speed/heading)
2. Reverse geocode when the client did not name the city or province
3. Normalize place names
4. Append the sample to the trace store
5. Fold it into the city visit aggregate
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from config import get_ingest_timeout_seconds
from core.exceptions import IngestionTimeoutError
from db.models import LocationPoint
from geo_service import get_geo_resolver
from places import is_unknown_place, normalize_place
from traces.services.trace_store import TraceStore
from traces.services.visit_aggregator import get_visit_aggregator

if TYPE_CHECKING:
    from db.models import CityVisit
    from db.schemas import LocationSampleIn
    from geo_service import GeoResolver
    from traces.services.visit_aggregator import VisitAggregator

logger = logging.getLogger(__name__)


def _known_or_none(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return value


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


class IngestionService:
    """Service class for location sample ingestion."""

    @staticmethod
    async def ingest(
        user_id: str,
        sample: LocationSampleIn,
        *,
        resolver: GeoResolver | None = None,
        aggregator: VisitAggregator | None = None,
        timeout_seconds: float | None = None,
    ) -> tuple[LocationPoint, CityVisit]:
        """
        Store one sample and update the matching city visit.

        Args:
            user_id: Authenticated owner of the sample
            sample: Validated request body
            resolver: Reverse geocoder, defaults to the process-wide one
            aggregator: Visit aggregator, defaults to the process-wide one
            timeout_seconds: End-to-end budget, defaults to INGEST_TIMEOUT_SECONDS

        Returns:
            The stored sample and the city visit after the update

        Raises:
            IngestionTimeoutError: If the whole pipeline exceeds its budget
            PersistenceConflictError: If the visit upsert kept losing races
        """
        budget = timeout_seconds or get_ingest_timeout_seconds()
        try:
            async with asyncio.timeout(budget):
                return await IngestionService._ingest(
                    user_id,
                    sample,
                    resolver or get_geo_resolver(),
                    aggregator or get_visit_aggregator(),
                )
        except TimeoutError as e:
            logger.error(
                "Ingestion for user %s at %s exceeded %.1fs",
                user_id,
                sample.timestamp,
                budget,
            )
            msg = "Location ingestion timed out"
            raise IngestionTimeoutError(
                msg,
                {"timeout_seconds": budget, "timestamp": sample.timestamp},
            ) from e

    @staticmethod
    async def _ingest(
        user_id: str,
        sample: LocationSampleIn,
        resolver: GeoResolver,
        aggregator: VisitAggregator,
    ) -> tuple[LocationPoint, CityVisit]:
        city_name = sample.cityName
        province_name = sample.provinceName

        if not (_has_text(city_name) and _has_text(province_name)):
            place = await resolver.resolve(sample.latitude, sample.longitude)
            if not _has_text(city_name):
                city_name = place.city_name
            if not _has_text(province_name):
                province_name = place.province_name

        city_name, province_name = normalize_place(city_name, province_name)
        if is_unknown_place(city_name, province_name):
            logger.info(
                "Sample for user %s at %s,%s has no known place",
                user_id,
                sample.longitude,
                sample.latitude,
            )

        point = LocationPoint(
            user_id=user_id,
            latitude=sample.latitude,
            longitude=sample.longitude,
            timestamp=sample.timestamp,
            accuracy=sample.accuracy,
            speed=_known_or_none(sample.speed),
            heading=_known_or_none(sample.heading),
            city_name=city_name,
            province_name=province_name,
        )
        await TraceStore.append(point)

        visit = await aggregator.upsert(
            user_id,
            city_name,
            province_name,
            sample.latitude,
            sample.longitude,
            sample.timestamp,
        )
        return point, visit
