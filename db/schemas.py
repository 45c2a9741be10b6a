"""
Pydantic schemas for request validation and API responses.

This module contains Pydantic models used for data validation across the application,
separating API-specific schemas from Beanie database documents.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

from db.models import CityVisit, LocationPoint


class LocationSampleIn(BaseModel):
    """Body of ``POST /api/traces/location``.

    ``speed`` and ``heading`` accept -1, which mobile platforms report for
    "unknown"; those values are dropped before storage.
    """

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: StrictInt = Field(..., ge=0, description="Client epoch milliseconds")
    accuracy: float | None = Field(default=None, ge=0)
    speed: float | None = Field(default=None, ge=-1)
    heading: float | None = Field(default=None, ge=-1, le=360)
    cityName: str | None = None
    provinceName: str | None = None


class LocationResponse(BaseModel):
    """A stored, normalized sample."""

    id: str
    latitude: float
    longitude: float
    timestamp: int
    accuracy: float | None = None
    speed: float | None = None
    heading: float | None = None
    cityName: str
    provinceName: str

    @classmethod
    def from_document(cls, point: LocationPoint) -> LocationResponse:
        return cls(
            id=str(point.id),
            latitude=point.latitude,
            longitude=point.longitude,
            timestamp=point.timestamp,
            accuracy=point.accuracy,
            speed=point.speed,
            heading=point.heading,
            cityName=point.city_name,
            provinceName=point.province_name,
        )


class TrajectoryPoint(BaseModel):
    latitude: float
    longitude: float
    timestamp: int
    accuracy: float | None = None
    speed: float | None = None
    heading: float | None = None

    @classmethod
    def from_document(cls, point: LocationPoint) -> TrajectoryPoint:
        return cls(
            latitude=point.latitude,
            longitude=point.longitude,
            timestamp=point.timestamp,
            accuracy=point.accuracy,
            speed=point.speed,
            heading=point.heading,
        )


class CityVisitResponse(BaseModel):
    """Response model for a single city visit record."""

    id: str = Field(..., description="City visit ID")
    cityName: str
    provinceName: str
    latitude: float
    longitude: float
    firstVisitDate: datetime
    lastVisitDate: datetime
    visitCount: int
    totalStayHours: float
    isLighted: bool

    @classmethod
    def from_document(cls, visit: CityVisit) -> CityVisitResponse:
        return cls(
            id=str(visit.id),
            cityName=visit.city_name,
            provinceName=visit.province_name,
            latitude=visit.latitude,
            longitude=visit.longitude,
            firstVisitDate=visit.first_visit_date,
            lastVisitDate=visit.last_visit_date,
            visitCount=visit.visit_count,
            totalStayHours=visit.total_stay_hours,
            isLighted=visit.is_lighted,
        )


class TraceStats(BaseModel):
    totalCities: int = 0
    totalProvinces: int = 0
    totalDistance: float = 0
    trackingDays: int = 0


class IngestLocationResponse(BaseModel):
    status: str = "success"
    message: str = "Location saved"
    location: LocationResponse
    city: CityVisitResponse


class CityListResponse(BaseModel):
    status: str = "success"
    cities: list[CityVisitResponse]


class CityDetailResponse(BaseModel):
    status: str = "success"
    city: CityVisitResponse


class StatsResponse(BaseModel):
    status: str = "success"
    stats: TraceStats


class TrajectoryResponse(BaseModel):
    status: str = "success"
    trajectory: list[TrajectoryPoint]
