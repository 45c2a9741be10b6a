from datetime import UTC, datetime

import pytest

from db.models import LocationPoint
from db.schemas import LocationSampleIn
from traces.services import IngestionService, StatsService, VisitAggregator

pytestmark = pytest.mark.usefixtures("day_bucket_aggregation")


class NoLookupResolver:
    async def resolve(self, latitude, longitude):
        raise AssertionError("resolver should not be called")


def _ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=UTC).timestamp() * 1000)


async def _ingest(user_id: str, timestamp: int, city: str, province: str, aggregator):
    sample = LocationSampleIn(
        latitude=30.66,
        longitude=104.06,
        timestamp=timestamp,
        cityName=city,
        provinceName=province,
    )
    return await IngestionService.ingest(
        user_id,
        sample,
        resolver=NoLookupResolver(),
        aggregator=aggregator,
    )


@pytest.mark.asyncio
async def test_stats_for_two_cities_over_two_days(beanie_db) -> None:
    aggregator = VisitAggregator()
    for hour in (8, 12, 18):
        await _ingest("u1", _ms(2024, 5, 1, hour), "成都", "四川", aggregator)
    await _ingest("u1", _ms(2024, 5, 2, 9), "北京市", "北京市", aggregator)

    stats = await StatsService.get_stats("u1")

    assert stats.totalCities == 2
    assert stats.totalProvinces == 2
    assert stats.trackingDays == 2
    assert stats.totalDistance == 0


@pytest.mark.asyncio
async def test_stats_count_unlit_cities_and_distinct_provinces(beanie_db) -> None:
    aggregator = VisitAggregator()
    await _ingest("u1", _ms(2024, 5, 1, 8), "成都", "四川", aggregator)
    await _ingest("u1", _ms(2024, 5, 1, 9), "绵阳", "四川省", aggregator)
    await _ingest("u2", _ms(2024, 5, 3, 9), "上海", "上海", aggregator)

    stats = await StatsService.get_stats("u1")

    assert stats.totalCities == 2
    assert stats.totalProvinces == 1
    assert stats.trackingDays == 1


@pytest.mark.asyncio
async def test_tracking_days_use_configured_timezone(
    beanie_db,
    monkeypatch,
    day_bucket_aggregation,
) -> None:
    aggregator = VisitAggregator()
    # 2024-05-01 20:00 UTC is already 2024-05-02 in Shanghai
    await _ingest("u1", _ms(2024, 5, 1, 10), "成都", "四川", aggregator)
    await _ingest("u1", _ms(2024, 5, 1, 20), "成都", "四川", aggregator)

    monkeypatch.setenv("STATS_TIMEZONE", "UTC")
    assert (await StatsService.get_stats("u1")).trackingDays == 1

    monkeypatch.setenv("STATS_TIMEZONE", "Asia/Shanghai")
    assert (await StatsService.get_stats("u1")).trackingDays == 2

    group_key = day_bucket_aggregation[-1][1]["$group"]["_id"]["$dateToString"]
    assert group_key["timezone"] == "Asia/Shanghai"


@pytest.mark.asyncio
async def test_tracking_days_are_bucketed_by_the_database(beanie_db, monkeypatch) -> None:
    calls = []

    async def fake_aggregate_count(model, pipeline, field="count"):
        calls.append((model, pipeline, field))
        return 7

    async def fail_distinct(*_args, **_kwargs):
        raise AssertionError("sample timestamps must not be loaded client-side")

    monkeypatch.setattr(
        "traces.services.trace_store.aggregate_count",
        fake_aggregate_count,
    )
    monkeypatch.setattr(LocationPoint, "distinct", fail_distinct)

    stats = await StatsService.get_stats("u1")

    assert stats.trackingDays == 7
    model, pipeline, field = calls[0]
    assert model is LocationPoint
    assert field == "days"
    assert pipeline[0] == {"$match": {"user_id": "u1"}}
    assert "$group" in pipeline[1]


@pytest.mark.asyncio
async def test_stats_for_unknown_user_are_zero(beanie_db) -> None:
    stats = await StatsService.get_stats("nobody")

    assert stats.model_dump() == {
        "totalCities": 0,
        "totalProvinces": 0,
        "totalDistance": 0,
        "trackingDays": 0,
    }
