"""Place-name handling shared by ingestion and maintenance scripts."""

from places.normalizer import (
    UNKNOWN_CITY,
    UNKNOWN_PROVINCE,
    is_unknown_place,
    normalize_city,
    normalize_place,
    normalize_province,
)

__all__ = [
    "UNKNOWN_CITY",
    "UNKNOWN_PROVINCE",
    "is_unknown_place",
    "normalize_city",
    "normalize_place",
    "normalize_province",
]
