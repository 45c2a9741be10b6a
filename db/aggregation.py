"""Aggregation helpers compatible with Motor or PyMongo async collections."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


async def aggregate_to_list(
    model: Any,
    pipeline: Sequence[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Run ``pipeline`` on the model's collection and collect every result."""
    cursor = model.get_pymongo_collection().aggregate(list(pipeline))
    if inspect.isawaitable(cursor):
        cursor = await cursor
    return await cursor.to_list(length=None)


async def aggregate_count(
    model: Any,
    pipeline: Sequence[dict[str, Any]],
    field: str = "count",
) -> int:
    """
    Run a pipeline that ends in ``{"$count": field}`` and return the number.

    ``$count`` emits no document at all when nothing matched, which is
    reported as 0.
    """
    rows = await aggregate_to_list(model, [*pipeline, {"$count": field}])
    if not rows:
        return 0
    return int(rows[0].get(field) or 0)
