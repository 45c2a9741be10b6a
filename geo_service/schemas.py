"""Parsing of Amap reverse-geocoding (regeo) responses."""

from __future__ import annotations

from typing import Any, NamedTuple

from core.exceptions import ResolverUnavailableError
from places.normalizer import UNKNOWN_CITY, UNKNOWN_PROVINCE


class ResolvedPlace(NamedTuple):
    """Raw (un-normalized) place names for a coordinate."""

    city_name: str
    province_name: str


UNKNOWN_PLACE = ResolvedPlace(UNKNOWN_CITY, UNKNOWN_PROVINCE)


def pick_text(value: Any) -> str:
    """First non-empty string from a field that may be a string or a list.

    Amap returns ``[]`` instead of ``""`` for empty components, e.g. the
    ``city`` of a municipality.
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str) and item.strip():
                return item.strip()
    return ""


def parse_regeo_response(data: Any) -> ResolvedPlace:
    """
    Extract raw city and province names from a regeo payload.

    City falls back through city, district, township, then province; province
    falls back to city.

    Raises:
        ResolverUnavailableError: provider reported an error or the payload
            lacks ``regeocode.addressComponent``.
    """
    if not isinstance(data, dict):
        msg = "Amap regeo returned a non-object payload"
        raise ResolverUnavailableError(msg)

    if str(data.get("status")) != "1":
        msg = f"Amap regeo error: {data.get('info') or 'unknown'}"
        raise ResolverUnavailableError(
            msg,
            {"info": data.get("info"), "infocode": data.get("infocode")},
        )

    regeocode = data.get("regeocode")
    component = regeocode.get("addressComponent") if isinstance(regeocode, dict) else None
    if not isinstance(component, dict):
        msg = "Amap regeo response missing addressComponent"
        raise ResolverUnavailableError(msg)

    city = (
        pick_text(component.get("city"))
        or pick_text(component.get("district"))
        or pick_text(component.get("township"))
        or pick_text(component.get("province"))
        or UNKNOWN_CITY
    )
    province = (
        pick_text(component.get("province"))
        or pick_text(component.get("city"))
        or UNKNOWN_PROVINCE
    )
    return ResolvedPlace(city, province)
