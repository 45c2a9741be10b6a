"""Coordinate → (city, province) resolution that never fails the caller."""

from __future__ import annotations

import asyncio
import logging

from config import get_geocode_timeout_seconds
from core.exceptions import ExternalServiceError

from .amap import AmapClient
from .cache import ReverseGeocodeCache
from .schemas import UNKNOWN_PLACE, ResolvedPlace

logger = logging.getLogger(__name__)


class GeoResolver:
    """
    Resolve coordinates to raw place names through Amap, with an LRU cache.

    Any provider problem (missing key, network error, timeout, error
    payload, paused provider) yields ``UNKNOWN_PLACE`` so ingestion is never
    blocked by geocoding. Cancellation of the calling task still propagates.
    """

    def __init__(
        self,
        client: AmapClient | None = None,
        cache: ReverseGeocodeCache[ResolvedPlace] | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._client = client or AmapClient()
        self._cache: ReverseGeocodeCache[ResolvedPlace] = cache or ReverseGeocodeCache()
        self._timeout = timeout_seconds or get_geocode_timeout_seconds()
        self._warned_unconfigured = False

    @property
    def cache(self) -> ReverseGeocodeCache[ResolvedPlace]:
        return self._cache

    async def resolve(self, latitude: float, longitude: float) -> ResolvedPlace:
        if not self._client.configured:
            if not self._warned_unconfigured:
                logger.warning(
                    "AMAP_API_KEY not configured; places resolve to unknown",
                )
                self._warned_unconfigured = True
            return UNKNOWN_PLACE

        cached = self._cache.get(latitude, longitude)
        if cached is not None:
            logger.debug("Regeo cache hit for %s,%s", longitude, latitude)
            return cached

        try:
            async with asyncio.timeout(self._timeout):
                place = await self._client.reverse_geocode(latitude, longitude)
        except TimeoutError:
            logger.warning(
                "Regeo timed out after %.1fs for %s,%s",
                self._timeout,
                longitude,
                latitude,
            )
            return UNKNOWN_PLACE
        except ExternalServiceError as e:
            logger.warning(
                "Regeo failed for %s,%s: %s %s",
                longitude,
                latitude,
                e.message,
                e.details,
            )
            return UNKNOWN_PLACE
        except Exception as e:
            logger.warning(
                "Regeo request failed for %s,%s: %s",
                longitude,
                latitude,
                e,
                exc_info=True,
            )
            return UNKNOWN_PLACE

        self._cache.put(latitude, longitude, place)
        return place


class _ResolverState:
    resolver: GeoResolver | None = None


def get_geo_resolver() -> GeoResolver:
    """Process-wide resolver built from configuration on first use."""
    if _ResolverState.resolver is None:
        _ResolverState.resolver = GeoResolver()
    return _ResolverState.resolver


def set_geo_resolver(resolver: GeoResolver | None) -> None:
    _ResolverState.resolver = resolver
