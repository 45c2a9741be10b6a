"""City visit aggregation and the lighting rule.

Each ingested sample bumps the (user, city, province) aggregate: one more
visit, plus the time elapsed since the user's previous sample in that city.
A city lights up once it has been visited twice or accumulated 48 hours,
and never goes dark again.

Writes to one key are serialized in-process with a per-key lock; across
processes, updates are guarded by the row's ``revision`` and inserts by the
unique (user, city, province) index. A lost race raises
PersistenceConflictError and the whole read-modify-write is retried.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pymongo.errors import DuplicateKeyError

from config import (
    LIGHTING_MIN_STAY_HOURS,
    LIGHTING_MIN_VISITS,
    get_upsert_max_attempts,
)
from core.constants import MILLISECONDS_PER_HOUR
from core.date_utils import get_current_utc_time
from core.exceptions import PersistenceConflictError
from core.http.retry import retry_async
from core.locks import KeyedLock
from db.models import CityVisit
from traces.services.trace_store import TraceStore

logger = logging.getLogger(__name__)


def lighting_decision(
    visit_count: int,
    total_stay_hours: float,
    already_lighted: bool,
) -> bool:
    """Lighting rule. Once lit, always lit."""
    if already_lighted:
        return True
    return (
        visit_count >= LIGHTING_MIN_VISITS
        or total_stay_hours >= LIGHTING_MIN_STAY_HOURS
    )


def stay_hours_between(previous_ms: int | None, current_ms: int) -> float:
    if previous_ms is None:
        return 0.0
    return (current_ms - previous_ms) / MILLISECONDS_PER_HOUR


class VisitAggregator:
    """Maintains ``city_visits`` rows from ingested samples."""

    def __init__(self, max_attempts: int | None = None) -> None:
        self._max_attempts = max_attempts or get_upsert_max_attempts()
        self._locks = KeyedLock()

    async def upsert(
        self,
        user_id: str,
        city_name: str,
        province_name: str,
        latitude: float,
        longitude: float,
        timestamp_ms: int,
    ) -> CityVisit:
        """
        Record one sample against its city visit row and return the new state.

        ``city_name`` and ``province_name`` must already be normalized.

        Raises:
            PersistenceConflictError: concurrent writers kept winning the race
                for this row after every retry.
        """
        key = (user_id, city_name, province_name)
        apply_with_retry = retry_async(
            max_retries=self._max_attempts - 1,
            retry_delay=0.05,
            max_delay=1.0,
            retry_exceptions=(PersistenceConflictError,),
        )(self._apply_once)

        async with self._locks.hold(key):
            return await apply_with_retry(
                user_id,
                city_name,
                province_name,
                latitude,
                longitude,
                timestamp_ms,
            )

    async def _apply_once(
        self,
        user_id: str,
        city_name: str,
        province_name: str,
        latitude: float,
        longitude: float,
        timestamp_ms: int,
    ) -> CityVisit:
        existing = await CityVisit.find_one(
            CityVisit.user_id == user_id,
            CityVisit.city_name == city_name,
            CityVisit.province_name == province_name,
        )
        now = get_current_utc_time()

        if existing is None:
            return await self._create(
                user_id, city_name, province_name, latitude, longitude, now
            )

        previous = await TraceStore.find_previous_in_city(
            user_id,
            city_name,
            timestamp_ms,
        )
        delta_hours = stay_hours_between(
            previous.timestamp if previous else None,
            timestamp_ms,
        )
        visit_count = existing.visit_count + 1
        total_stay_hours = existing.total_stay_hours + delta_hours
        is_lighted = lighting_decision(visit_count, total_stay_hours, existing.is_lighted)

        changes: dict[str, Any] = {
            "visit_count": visit_count,
            "total_stay_hours": total_stay_hours,
            "is_lighted": is_lighted,
            "last_visit_date": now,
            "latitude": latitude,
            "longitude": longitude,
            "updated_at": now,
        }
        result = await CityVisit.get_pymongo_collection().update_one(
            {"_id": existing.id, "revision": existing.revision},
            {"$set": changes, "$inc": {"revision": 1}},
        )
        if result.matched_count == 0:
            msg = "City visit changed during update"
            raise PersistenceConflictError(
                msg,
                {"city_visit_id": str(existing.id), "revision": existing.revision},
            )

        if is_lighted and not existing.is_lighted:
            logger.info(
                "Lit %s/%s for user %s (visits=%d, stay=%.2fh)",
                city_name,
                province_name,
                user_id,
                visit_count,
                total_stay_hours,
            )

        for field, value in changes.items():
            setattr(existing, field, value)
        existing.revision += 1
        return existing

    @staticmethod
    async def _create(
        user_id: str,
        city_name: str,
        province_name: str,
        latitude: float,
        longitude: float,
        now: datetime,
    ) -> CityVisit:
        visit = CityVisit(
            user_id=user_id,
            city_name=city_name,
            province_name=province_name,
            latitude=latitude,
            longitude=longitude,
            first_visit_date=now,
            last_visit_date=now,
            visit_count=1,
            total_stay_hours=0.0,
            is_lighted=False,
            created_at=now,
            updated_at=now,
        )
        try:
            await visit.insert()
        except DuplicateKeyError as e:
            msg = "City visit created concurrently"
            raise PersistenceConflictError(
                msg,
                {"user_id": user_id, "city_name": city_name},
            ) from e
        logger.info(
            "First visit to %s/%s for user %s",
            city_name,
            province_name,
            user_id,
        )
        return visit


class _AggregatorState:
    aggregator: VisitAggregator | None = None


def get_visit_aggregator() -> VisitAggregator:
    if _AggregatorState.aggregator is None:
        _AggregatorState.aggregator = VisitAggregator()
    return _AggregatorState.aggregator
