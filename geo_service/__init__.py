"""
Reverse geocoding for incoming location samples.

Resolves coordinates to raw city/province names through Amap, with a bounded
coordinate cache, a per-client failure breaker and a soft-fail policy.
"""

from .amap import AmapClient
from .breaker import ProviderBreaker, ProviderUnavailable
from .cache import ReverseGeocodeCache, coordinate_key
from .resolver import GeoResolver, get_geo_resolver, set_geo_resolver
from .schemas import UNKNOWN_PLACE, ResolvedPlace, parse_regeo_response

__all__ = [
    "UNKNOWN_PLACE",
    "AmapClient",
    "GeoResolver",
    "ProviderBreaker",
    "ProviderUnavailable",
    "ResolvedPlace",
    "ReverseGeocodeCache",
    "coordinate_key",
    "get_geo_resolver",
    "parse_regeo_response",
    "set_geo_resolver",
]
