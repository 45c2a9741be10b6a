import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from network_blocker import install_network_blocker

from core.auth import set_token_resolver
from db.models import ALL_DOCUMENT_MODELS
from geo_service import set_geo_resolver
from traces.services import visit_aggregator

TEST_AUTH_SECRET = "test-secret"


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AMAP_API_KEY", raising=False)
    monkeypatch.setenv("AUTH_TOKEN_SECRET", TEST_AUTH_SECRET)
    monkeypatch.setenv("MONGO_LOGGING_ENABLED", "false")
    monkeypatch.setenv("STATS_TIMEZONE", "UTC")
    install_network_blocker(monkeypatch)


@pytest.fixture(autouse=True)
def _reset_process_state():
    set_geo_resolver(None)
    set_token_resolver(None)
    visit_aggregator._AggregatorState.aggregator = None
    yield
    set_geo_resolver(None)
    set_token_resolver(None)
    visit_aggregator._AggregatorState.aggregator = None


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=ALL_DOCUMENT_MODELS)
    return database


@pytest.fixture
def day_bucket_aggregation(monkeypatch: pytest.MonkeyPatch) -> list[list[dict]]:
    """
    Evaluate the tracking-days pipeline in Python.

    mongomock does not implement ``timezone`` for ``$dateToString``. The fake
    reads the ``$match`` filter and timezone out of the pipeline it receives
    and buckets the matching samples itself. Received pipelines are returned
    for shape assertions.
    """
    pipelines: list[list[dict]] = []

    async def fake_aggregate_count(model, pipeline, field="count"):
        pipelines.append(list(pipeline))
        match = pipeline[0]["$match"]
        day = pipeline[1]["$group"]["_id"]["$dateToString"]
        tz = ZoneInfo(day["timezone"])
        points = await model.find(match).to_list()
        return len({datetime.fromtimestamp(p.timestamp / 1000, tz).date() for p in points})

    monkeypatch.setattr(
        "traces.services.trace_store.aggregate_count",
        fake_aggregate_count,
    )
    return pipelines
