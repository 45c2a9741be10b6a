"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import constants and getters from here rather than calling
os.getenv directly in multiple places.

Getters read the environment at call time so tests can patch it.
"""

from __future__ import annotations

import os
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


APP_NAME: Final[str] = "Footprint"
APP_VERSION: Final[str] = "1.0.0"

# --- Amap (Gaode) reverse geocoding ---
DEFAULT_AMAP_REGEO_URL: Final[str] = "https://restapi.amap.com/v3/geocode/regeo"
AMAP_REGEO_RADIUS_METERS: Final[int] = 1000

# --- Defaults ---
DEFAULT_GEOCODE_TIMEOUT_SECONDS: Final[float] = 5.0
DEFAULT_GEOCODE_CACHE_SIZE: Final[int] = 10_000
DEFAULT_GEOCODE_RATE_LIMIT_PER_SECOND: Final[float] = 3.0
DEFAULT_INGEST_TIMEOUT_SECONDS: Final[float] = 15.0
DEFAULT_UPSERT_MAX_ATTEMPTS: Final[int] = 5
DEFAULT_STATS_TIMEZONE: Final[str] = "UTC"

# --- Lighting rule ---
LIGHTING_MIN_VISITS: Final[int] = 2
LIGHTING_MIN_STAY_HOURS: Final[float] = 48.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_amap_api_key() -> str | None:
    """Return the Amap web-service key, or None when geocoding is disabled."""
    key = os.getenv("AMAP_API_KEY", "").strip()
    return key or None


def get_amap_regeo_url() -> str:
    return os.getenv("AMAP_REGEO_URL", "").strip() or DEFAULT_AMAP_REGEO_URL


def get_geocode_timeout_seconds() -> float:
    return _float_env("GEOCODE_TIMEOUT_SECONDS", DEFAULT_GEOCODE_TIMEOUT_SECONDS)


def get_geocode_cache_size() -> int:
    return _int_env("GEOCODE_CACHE_SIZE", DEFAULT_GEOCODE_CACHE_SIZE)


def get_geocode_rate_limit() -> float:
    return _float_env(
        "GEOCODE_RATE_LIMIT_PER_SECOND",
        DEFAULT_GEOCODE_RATE_LIMIT_PER_SECOND,
    )


def get_ingest_timeout_seconds() -> float:
    return _float_env("INGEST_TIMEOUT_SECONDS", DEFAULT_INGEST_TIMEOUT_SECONDS)


def get_upsert_max_attempts() -> int:
    return _int_env("UPSERT_MAX_ATTEMPTS", DEFAULT_UPSERT_MAX_ATTEMPTS)


def get_stats_timezone() -> ZoneInfo:
    """Timezone used to bucket sample timestamps into calendar days."""
    name = os.getenv("STATS_TIMEZONE", "").strip() or DEFAULT_STATS_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_STATS_TIMEZONE)


def get_auth_token_secret() -> str | None:
    secret = os.getenv("AUTH_TOKEN_SECRET", "").strip()
    return secret or None


def get_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def mongo_logging_enabled() -> bool:
    raw = os.getenv("MONGO_LOGGING_ENABLED", "true").strip().lower()
    return raw not in {"0", "false", "no", "off"}


__all__ = [
    "AMAP_REGEO_RADIUS_METERS",
    "APP_NAME",
    "APP_VERSION",
    "LIGHTING_MIN_STAY_HOURS",
    "LIGHTING_MIN_VISITS",
    "get_amap_api_key",
    "get_amap_regeo_url",
    "get_auth_token_secret",
    "get_cors_origins",
    "get_geocode_cache_size",
    "get_geocode_rate_limit",
    "get_geocode_timeout_seconds",
    "get_ingest_timeout_seconds",
    "get_log_level",
    "get_stats_timezone",
    "get_upsert_max_attempts",
    "mongo_logging_enabled",
]
