import threading

import pytest

from geo_service import ReverseGeocodeCache, ResolvedPlace, coordinate_key


def test_coordinate_key_quantizes_to_five_decimals() -> None:
    assert coordinate_key(30.6598628, 104.0633717) == "104.06337,30.65986"
    assert coordinate_key(30.659861, 104.063371) == coordinate_key(
        30.6598612,
        104.0633709,
    )


def test_coordinate_key_rejects_non_finite() -> None:
    assert coordinate_key(float("nan"), 104.0) is None
    assert coordinate_key(30.0, float("inf")) is None


def test_cache_hit_and_miss_counters() -> None:
    cache: ReverseGeocodeCache[ResolvedPlace] = ReverseGeocodeCache(maxsize=4)
    place = ResolvedPlace("成都市", "四川省")

    assert cache.get(30.66, 104.06) is None
    cache.put(30.66, 104.06, place)

    assert cache.get(30.66, 104.06) == place
    assert cache.hits == 1
    assert cache.misses == 1


def test_cache_evicts_least_recently_used() -> None:
    cache: ReverseGeocodeCache[str] = ReverseGeocodeCache(maxsize=2)
    cache.put(1.0, 1.0, "a")
    cache.put(2.0, 2.0, "b")

    # Touch "a" so "b" becomes the eviction candidate
    assert cache.get(1.0, 1.0) == "a"
    cache.put(3.0, 3.0, "c")

    assert len(cache) == 2
    assert cache.get(2.0, 2.0) is None
    assert cache.get(1.0, 1.0) == "a"
    assert cache.get(3.0, 3.0) == "c"


def test_cache_size_never_exceeds_capacity_under_threads() -> None:
    cache: ReverseGeocodeCache[int] = ReverseGeocodeCache(maxsize=50)
    sizes: list[int] = []

    def writer(offset: int) -> None:
        for i in range(500):
            cache.put(offset + i * 0.001, 100.0, i)
            sizes.append(len(cache))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 50
    assert max(sizes) <= 50


def test_cache_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        ReverseGeocodeCache(maxsize=0)


def test_cache_defaults_to_configured_size(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEOCODE_CACHE_SIZE", "3")
    assert ReverseGeocodeCache().maxsize == 3
