"""Append-only storage of location samples."""

import logging

from db.aggregation import aggregate_count
from db.models import LocationPoint

logger = logging.getLogger(__name__)


class TraceStore:
    """Service class for the ``location_points`` collection."""

    @staticmethod
    async def append(sample: LocationPoint) -> str:
        """Insert a new sample and return its id. Samples are never updated."""
        if sample.id is not None:
            msg = "Location samples are append-only; sample already has an id"
            raise ValueError(msg)
        await sample.insert()
        logger.debug(
            "Stored sample %s for user %s at %s (%s/%s)",
            sample.id,
            sample.user_id,
            sample.timestamp,
            sample.city_name,
            sample.province_name,
        )
        return str(sample.id)

    @staticmethod
    async def query_trajectory(
        user_id: str,
        start_ms: int | None = None,
        end_ms: int | None = None,
    ) -> list[LocationPoint]:
        """
        Samples for a user in ascending timestamp order.

        Args:
            user_id: Owner of the samples
            start_ms: Inclusive lower bound (epoch millis), unrestricted if None
            end_ms: Inclusive upper bound (epoch millis), unrestricted if None
        """
        conditions = [LocationPoint.user_id == user_id]
        if start_ms is not None:
            conditions.append(LocationPoint.timestamp >= start_ms)
        if end_ms is not None:
            conditions.append(LocationPoint.timestamp <= end_ms)

        return await LocationPoint.find(*conditions).sort(LocationPoint.timestamp).to_list()

    @staticmethod
    async def find_previous_in_city(
        user_id: str,
        city_name: str,
        before_ms: int,
    ) -> LocationPoint | None:
        """
        Latest sample in ``city_name`` strictly older than ``before_ms``.

        The strict bound keeps a just-stored sample (or a duplicate-timestamp
        sample) from matching itself. There is no lower time bound: any
        earlier sample in the city counts, however old.
        """
        return await (
            LocationPoint.find(
                LocationPoint.user_id == user_id,
                LocationPoint.city_name == city_name,
                LocationPoint.timestamp < before_ms,
            )
            .sort(-LocationPoint.timestamp)
            .first_or_none()
        )

    @staticmethod
    def tracking_days_pipeline(user_id: str, timezone_name: str) -> list[dict]:
        """Group a user's samples by calendar day in ``timezone_name``."""
        return [
            {"$match": {"user_id": user_id}},
            {
                "$group": {
                    "_id": {
                        "$dateToString": {
                            "format": "%Y-%m-%d",
                            "date": {"$toDate": {"$toLong": "$timestamp"}},
                            "timezone": timezone_name,
                        },
                    },
                },
            },
        ]

    @staticmethod
    async def count_tracking_days(user_id: str, timezone_name: str) -> int:
        """Number of distinct calendar days (in ``timezone_name``) with samples."""
        return await aggregate_count(
            LocationPoint,
            TraceStore.tracking_days_pipeline(user_id, timezone_name),
            "days",
        )
