#!/usr/bin/env python3
"""Collapse city visit rows that normalize to the same place.

Rows written before names were normalized can split one place across
several rows ("四川"/"四川省", "成都"/"成都市"). This script re-normalizes
every row, folds each group into its oldest row and rewrites the stored
names on location samples.

Dry-run is the default behavior. Pass --execute to apply changes.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pymongo import MongoClient

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.date_utils import ensure_utc, get_current_utc_time
from places import normalize_place
from traces.services.visit_aggregator import lighting_decision

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI = "mongodb://mongo:27017"
DEFAULT_DB_NAME = "footprint"

PlaceKey = tuple[str, str, str]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Merge city visit rows that share a canonical place name.",
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Apply changes. Without this flag, the script only reports what would change.",
    )
    return parser.parse_args()


def _get_mongo_client() -> MongoClient:
    mongo_uri = os.getenv("MONGODB_URI", DEFAULT_MONGO_URI)
    return MongoClient(mongo_uri)


def canonical_key(row: dict[str, Any]) -> PlaceKey:
    city, province = normalize_place(row.get("city_name"), row.get("province_name"))
    return str(row["user_id"]), city, province


def group_by_place(rows: Iterable[dict[str, Any]]) -> dict[PlaceKey, list[dict[str, Any]]]:
    groups: dict[PlaceKey, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        groups[canonical_key(row)].append(row)
    return dict(groups)


def merge_visit_rows(rows: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Fold city visit rows for one canonical place into a single row.

    Counts and stay hours are summed, the visit window spans all rows,
    coordinates come from the most recently visited row and the lighting
    rule is applied to the merged totals (a row that was lit stays lit).
    The oldest row's ``_id`` survives.

    Returns:
        The merged document, including ``_id`` and canonical names.

    Raises:
        ValueError: If rows is empty or spans more than one canonical place
    """
    if not rows:
        msg = "Cannot merge an empty group of city visits"
        raise ValueError(msg)

    keys = {canonical_key(row) for row in rows}
    if len(keys) != 1:
        msg = f"Rows belong to different places: {sorted(keys)}"
        raise ValueError(msg)
    user_id, city_name, province_name = keys.pop()

    oldest = min(rows, key=lambda r: ensure_utc(r["first_visit_date"]))
    latest = max(rows, key=lambda r: ensure_utc(r["last_visit_date"]))

    visit_count = sum(int(r.get("visit_count") or 0) for r in rows)
    total_stay_hours = sum(float(r.get("total_stay_hours") or 0.0) for r in rows)
    was_lighted = any(bool(r.get("is_lighted")) for r in rows)

    return {
        "_id": oldest["_id"],
        "user_id": user_id,
        "city_name": city_name,
        "province_name": province_name,
        "latitude": latest["latitude"],
        "longitude": latest["longitude"],
        "first_visit_date": ensure_utc(oldest["first_visit_date"]),
        "last_visit_date": ensure_utc(latest["last_visit_date"]),
        "visit_count": visit_count,
        "total_stay_hours": total_stay_hours,
        "is_lighted": lighting_decision(visit_count, total_stay_hours, was_lighted),
        "revision": max(int(r.get("revision") or 0) for r in rows) + 1,
    }


def _needs_rewrite(rows: list[dict[str, Any]]) -> bool:
    if len(rows) > 1:
        return True
    row = rows[0]
    _, city, province = canonical_key(row)
    return row.get("city_name") != city or row.get("province_name") != province


def merge_city_visits(db, *, execute: bool) -> int:
    """Merge or rename city visit rows; return the number of groups touched."""
    visits = db["city_visits"]
    groups = group_by_place(visits.find({}))
    touched = 0

    for (user_id, city, province), rows in groups.items():
        if not _needs_rewrite(rows):
            continue
        touched += 1
        merged = merge_visit_rows(rows)
        duplicate_ids = [r["_id"] for r in rows if r["_id"] != merged["_id"]]
        logger.info(
            "%s %d row(s) for user %s into %s/%s (visits=%d, stay=%.2fh)",
            "Merging" if execute else "Would merge",
            len(rows),
            user_id,
            city,
            province,
            merged["visit_count"],
            merged["total_stay_hours"],
        )
        if not execute:
            continue

        # Delete before renaming the survivor (unique place index)
        if duplicate_ids:
            visits.delete_many({"_id": {"$in": duplicate_ids}})
        fields = {k: v for k, v in merged.items() if k != "_id"}
        fields["updated_at"] = get_current_utc_time()
        visits.update_one({"_id": merged["_id"]}, {"$set": fields})

    return touched


def normalize_location_names(db, *, execute: bool) -> int:
    """Rewrite non-canonical names on location samples; return samples changed."""
    points = db["location_points"]
    pairs = points.aggregate(
        [{"$group": {"_id": {"city": "$city_name", "province": "$province_name"}}}],
    )
    changed = 0

    for pair in pairs:
        raw_city = pair["_id"].get("city")
        raw_province = pair["_id"].get("province")
        city, province = normalize_place(raw_city, raw_province)
        if (city, province) == (raw_city, raw_province):
            continue

        query = {"city_name": raw_city, "province_name": raw_province}
        if not execute:
            count = points.count_documents(query)
            logger.info(
                "Would rename %d sample(s) %s/%s -> %s/%s",
                count,
                raw_city,
                raw_province,
                city,
                province,
            )
            changed += count
            continue

        result = points.update_many(
            query,
            {"$set": {"city_name": city, "province_name": province}},
        )
        changed += int(result.modified_count or 0)

    return changed


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    args = parse_args()
    db_name = os.getenv("MONGODB_DATABASE", DEFAULT_DB_NAME)
    client = _get_mongo_client()
    db = client[db_name]

    if not args.execute:
        logger.info("Dry run; pass --execute to apply changes.")

    logger.info("Merging duplicate city visits in %s...", db_name)
    groups = merge_city_visits(db, execute=args.execute)
    logger.info("Touched %d city visit group(s).", groups)

    logger.info("Normalizing place names on location samples...")
    samples = normalize_location_names(db, execute=args.execute)
    logger.info("Renamed %d location sample(s).", samples)

    client.close()


if __name__ == "__main__":
    main()
