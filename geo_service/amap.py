"""Amap (Gaode) reverse-geocoding client."""

from __future__ import annotations

import logging
import time

from aiolimiter import AsyncLimiter

from config import (
    AMAP_REGEO_RADIUS_METERS,
    get_amap_api_key,
    get_amap_regeo_url,
    get_geocode_rate_limit,
)
from core.exceptions import ResolverUnavailableError
from core.http.request import get_json
from core.http.retry import retry_async
from core.http.session import get_session

from .breaker import ProviderBreaker
from .schemas import ResolvedPlace, parse_regeo_response

logger = logging.getLogger(__name__)


class AmapClient:
    """Thin wrapper over ``/v3/geocode/regeo``.

    Raises on every failure; soft-fail policy lives in GeoResolver.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        regeo_url: str | None = None,
        rate_limit_per_second: float | None = None,
        breaker: ProviderBreaker | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else get_amap_api_key()
        self._regeo_url = regeo_url or get_amap_regeo_url()
        rate = rate_limit_per_second or get_geocode_rate_limit()
        self._limiter = AsyncLimiter(rate, 1)
        self.breaker = breaker or ProviderBreaker("Amap regeo")

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @retry_async(max_retries=1, retry_delay=0.2)
    async def _fetch_regeo(self, latitude: float, longitude: float) -> dict:
        params = {
            "key": self._api_key,
            # Amap takes "longitude,latitude"
            "location": f"{longitude},{latitude}",
            "radius": str(AMAP_REGEO_RADIUS_METERS),
            "extensions": "base",
            "output": "JSON",
        }
        session = await get_session()
        async with self._limiter:
            return await get_json(
                self._regeo_url,
                session=session,
                params=params,
                service_name="Amap regeo",
            )

    async def reverse_geocode(self, latitude: float, longitude: float) -> ResolvedPlace:
        if not self._api_key:
            msg = "AMAP_API_KEY is not configured"
            raise ResolverUnavailableError(msg)

        started = time.monotonic()
        logger.info("Amap regeo request for %s,%s", longitude, latitude)
        data = await self.breaker.call(self._fetch_regeo, latitude, longitude)
        place = parse_regeo_response(data)
        logger.info(
            "Amap regeo resolved %s,%s -> %s/%s in %.0f ms",
            longitude,
            latitude,
            place.city_name,
            place.province_name,
            (time.monotonic() - started) * 1000,
        )
        return place
