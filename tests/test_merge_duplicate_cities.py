import importlib.util
from datetime import UTC, datetime
from pathlib import Path

import mongomock
import pytest
from bson import ObjectId

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "python" / "merge_duplicate_cities.py"
_spec = importlib.util.spec_from_file_location("merge_duplicate_cities", _SCRIPT)
merge_script = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(merge_script)

D1 = datetime(2024, 1, 1, tzinfo=UTC)
D2 = datetime(2024, 2, 1, tzinfo=UTC)
D3 = datetime(2024, 3, 1, tzinfo=UTC)


def _row(city, province, *, first, last, count=1, hours=0.0, lit=False, lat=30.0):
    return {
        "_id": ObjectId(),
        "user_id": "u1",
        "city_name": city,
        "province_name": province,
        "latitude": lat,
        "longitude": 104.0,
        "first_visit_date": first,
        "last_visit_date": last,
        "visit_count": count,
        "total_stay_hours": hours,
        "is_lighted": lit,
        "revision": 0,
    }


def test_merge_visit_rows_folds_counts_and_window() -> None:
    older = _row("成都", "四川", first=D1, last=D2, count=1, hours=5.0, lat=30.1)
    newer = _row("成都市", "四川省", first=D2, last=D3, count=1, hours=50.0, lat=30.9)

    merged = merge_script.merge_visit_rows([newer, older])

    assert merged["_id"] == older["_id"]
    assert (merged["city_name"], merged["province_name"]) == ("成都市", "四川省")
    assert merged["visit_count"] == 2
    assert merged["total_stay_hours"] == pytest.approx(55.0)
    assert merged["first_visit_date"] == D1
    assert merged["last_visit_date"] == D3
    assert merged["latitude"] == 30.9
    assert merged["is_lighted"] is True
    assert merged["revision"] == 1


def test_merge_visit_rows_keeps_lit_rows_lit() -> None:
    lit = _row("成都市", "四川省", first=D1, last=D1, count=0, lit=True)

    assert merge_script.merge_visit_rows([lit])["is_lighted"] is True


def test_merge_visit_rows_rejects_bad_groups() -> None:
    with pytest.raises(ValueError):
        merge_script.merge_visit_rows([])

    with pytest.raises(ValueError):
        merge_script.merge_visit_rows(
            [
                _row("成都", "四川", first=D1, last=D1),
                _row("绵阳", "四川", first=D1, last=D1),
            ],
        )


def _seed(db):
    db["city_visits"].insert_many(
        [
            _row("成都", "四川", first=D1, last=D2, count=1, hours=1.0),
            _row("成都市", "四川省", first=D2, last=D3, count=3, hours=2.0, lit=True),
            _row("绵阳市", "四川省", first=D1, last=D1),
            _row("上海市", "上海市", first=D1, last=D1),
        ],
    )
    db["location_points"].insert_many(
        [
            {"user_id": "u1", "timestamp": 1, "city_name": "成都", "province_name": "四川"},
            {"user_id": "u1", "timestamp": 2, "city_name": "成都", "province_name": "四川"},
            {"user_id": "u1", "timestamp": 3, "city_name": "绵阳市", "province_name": "四川省"},
        ],
    )


def test_dry_run_changes_nothing() -> None:
    db = mongomock.MongoClient()["footprint"]
    _seed(db)

    touched = merge_script.merge_city_visits(db, execute=False)
    renamed = merge_script.normalize_location_names(db, execute=False)

    assert touched == 2
    assert renamed == 2
    assert db["city_visits"].count_documents({}) == 4
    assert db["location_points"].count_documents({"city_name": "成都"}) == 2


def test_execute_merges_and_renames() -> None:
    db = mongomock.MongoClient()["footprint"]
    _seed(db)

    merge_script.merge_city_visits(db, execute=True)
    merge_script.normalize_location_names(db, execute=True)

    visits = {v["city_name"]: v for v in db["city_visits"].find({})}
    assert set(visits) == {"成都市", "绵阳市", "上海市"}
    assert visits["成都市"]["visit_count"] == 4
    assert visits["成都市"]["is_lighted"] is True
    assert visits["上海市"]["province_name"] == "上海"
    assert db["location_points"].count_documents({"city_name": "成都市"}) == 2
    assert db["location_points"].count_documents({"province_name": "四川"}) == 0
