"""Canonical city and province names.

Clients and the geocoder report the same place in different spellings
("四川" and "四川省", "自贡" and "自贡市"). Every name is passed through these
functions before it touches storage, so a place always maps to one city
visit row. All functions are pure and idempotent.
"""

from __future__ import annotations

from typing import Any, Final

UNKNOWN_CITY: Final[str] = "未知城市"
UNKNOWN_PROVINCE: Final[str] = "未知省份"

CITY_SUFFIX: Final[str] = "市"
CITY_LEVEL_SUFFIXES: Final[tuple[str, ...]] = ("市", "区", "县")

PROVINCE_SUFFIX: Final[str] = "省"
AUTONOMOUS_REGION_SUFFIX: Final[str] = "自治区"
SAR_SUFFIX: Final[str] = "特别行政区"

MUNICIPALITIES: Final[tuple[str, ...]] = ("北京", "天津", "上海", "重庆")
SPECIAL_ADMINISTRATIVE_REGIONS: Final[tuple[str, ...]] = ("香港", "澳门")


def _clean(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def normalize_city(raw: Any) -> str:
    """Canonical city name: keep 市/区/县 names, otherwise append 市."""
    name = _clean(raw)
    if not name:
        return UNKNOWN_CITY
    if name.endswith(CITY_LEVEL_SUFFIXES):
        return name
    return f"{name}{CITY_SUFFIX}"


def normalize_province(raw: Any) -> str:
    """Canonical province name.

    Municipalities collapse to their bare name ("北京市" -> "北京"), Hong
    Kong and Macau gain the SAR suffix, autonomous regions and SARs are kept,
    and everything else ends in 省.
    """
    name = _clean(raw)
    if not name or name == UNKNOWN_PROVINCE:
        return UNKNOWN_PROVINCE

    for municipality in MUNICIPALITIES:
        if name.startswith(municipality):
            return municipality

    for region in SPECIAL_ADMINISTRATIVE_REGIONS:
        if name.startswith(region):
            return f"{region}{SAR_SUFFIX}"

    if name.endswith((AUTONOMOUS_REGION_SUFFIX, SAR_SUFFIX)):
        return name

    if not name.endswith(PROVINCE_SUFFIX):
        name = f"{name}{PROVINCE_SUFFIX}"
    return name


def normalize_place(city: Any, province: Any) -> tuple[str, str]:
    return normalize_city(city), normalize_province(province)


def is_unknown_place(city: str, province: str) -> bool:
    return city == UNKNOWN_CITY and province == UNKNOWN_PROVINCE
