"""Bounded LRU cache for reverse-geocoding results."""

from __future__ import annotations

import math
import threading
from collections import OrderedDict
from typing import Generic, TypeVar

from config import get_geocode_cache_size

V = TypeVar("V")

COORDINATE_PRECISION = 5  # ~1.1 m at the equator


def coordinate_key(latitude: float, longitude: float) -> str | None:
    """Quantized ``"lon,lat"`` key, or None for non-finite input."""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return f"{lon:.{COORDINATE_PRECISION}f},{lat:.{COORDINATE_PRECISION}f}"


class ReverseGeocodeCache(Generic[V]):
    """LRU cache keyed by quantized coordinates.

    A single lock guards every read and write, so eviction never races a
    concurrent lookup. ``len(cache)`` never exceeds ``maxsize``.
    """

    def __init__(self, maxsize: int | None = None) -> None:
        size = maxsize if maxsize is not None else get_geocode_cache_size()
        if size < 1:
            msg = "maxsize must be at least 1"
            raise ValueError(msg)
        self._maxsize = size
        self._data: OrderedDict[str, V] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def get(self, latitude: float, longitude: float) -> V | None:
        key = coordinate_key(latitude, longitude)
        if key is None:
            return None
        with self._lock:
            value = self._data.get(key)
            if value is None:
                self.misses += 1
                return None
            self._data.move_to_end(key)
            self.hits += 1
            return value

    def put(self, latitude: float, longitude: float, value: V) -> None:
        key = coordinate_key(latitude, longitude)
        if key is None:
            return
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = value
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

