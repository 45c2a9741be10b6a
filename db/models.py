"""Beanie ODM document models for MongoDB collections.

This module defines all document models using Beanie ODM, which provides:
- Automatic Pydantic validation
- Built-in async CRUD operations
- Proper ObjectId/datetime serialization
- Index definitions at the model level

Usage:
    from db.models import CityVisit, LocationPoint

    # Latest sample for a user
    point = await LocationPoint.find(LocationPoint.user_id == "u1").sort(
        -LocationPoint.timestamp
    ).first_or_none()

    # City visits, most recent first
    visits = await CityVisit.find(CityVisit.user_id == "u1").sort(
        -CityVisit.last_visit_date
    ).to_list()
"""

from __future__ import annotations

from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from core.date_utils import get_current_utc_time, parse_timestamp


class LocationPoint(Document):
    """A single GPS sample uploaded by a user. Append-only."""

    user_id: str
    latitude: float
    longitude: float
    timestamp: int
    accuracy: float | None = None
    speed: float | None = None
    heading: float | None = None
    city_name: str
    province_name: str
    created_at: datetime = Field(default_factory=get_current_utc_time)

    class Settings:
        name = "location_points"
        indexes = [
            IndexModel(
                [("user_id", ASCENDING), ("timestamp", ASCENDING)],
                name="location_points_user_timestamp_idx",
            ),
            IndexModel(
                [
                    ("user_id", ASCENDING),
                    ("city_name", ASCENDING),
                    ("timestamp", DESCENDING),
                ],
                name="location_points_user_city_timestamp_idx",
            ),
        ]


class CityVisit(Document):
    """Per-(user, city, province) visit aggregate."""

    user_id: str
    city_name: str
    province_name: str
    latitude: float
    longitude: float
    first_visit_date: datetime
    last_visit_date: datetime
    visit_count: int = 1
    total_stay_hours: float = 0.0
    is_lighted: bool = False
    revision: int = 0
    created_at: datetime = Field(default_factory=get_current_utc_time)
    updated_at: datetime = Field(default_factory=get_current_utc_time)

    @field_validator(
        "first_visit_date",
        "last_visit_date",
        "created_at",
        "updated_at",
        mode="before",
    )
    @classmethod
    def parse_datetime_fields(cls, v):
        """Parse datetime fields using the centralized date_utils."""
        if isinstance(v, datetime | str):
            return parse_timestamp(v) or v
        return v

    class Settings:
        name = "city_visits"
        indexes = [
            IndexModel(
                [
                    ("user_id", ASCENDING),
                    ("city_name", ASCENDING),
                    ("province_name", ASCENDING),
                ],
                name="city_visits_user_place_unique_idx",
                unique=True,
            ),
            IndexModel(
                [("user_id", ASCENDING), ("last_visit_date", DESCENDING)],
                name="city_visits_user_last_visit_idx",
            ),
        ]


class ServerLog(Document):
    """Server log document for MongoDB logging handler."""

    timestamp: Indexed(datetime, index_type=DESCENDING) | None = None
    level: str | None = None
    logger_name: str | None = None
    message: str | None = None
    pathname: str | None = None
    lineno: int | None = None
    funcName: str | None = None
    exc_info: str | None = None

    class Settings:
        name = "server_logs"
        indexes = [
            IndexModel([("level", ASCENDING)], name="server_logs_level_idx"),
            IndexModel(
                [("timestamp", ASCENDING)],
                name="server_logs_ttl_idx",
                expireAfterSeconds=30 * 24 * 60 * 60,
            ),
        ]

    class Config:
        extra = "allow"


ALL_DOCUMENT_MODELS = [
    LocationPoint,
    CityVisit,
    ServerLog,
]
