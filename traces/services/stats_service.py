"""Per-user summary statistics."""

import logging

from config import get_stats_timezone
from db.models import CityVisit
from db.schemas import TraceStats
from traces.services.trace_store import TraceStore

logger = logging.getLogger(__name__)


class StatsService:
    """Service class for trace statistics."""

    @staticmethod
    async def get_stats(user_id: str) -> TraceStats:
        """
        Summarize a user's footprint.

        Returns:
            TraceStats with the number of city visit rows (lit or not), the
            number of distinct provinces across them, and the number of
            distinct calendar days (in STATS_TIMEZONE) that carry samples.
            Distance is not tracked and is always 0.
        """
        total_cities = await CityVisit.find(CityVisit.user_id == user_id).count()
        provinces = await CityVisit.distinct(
            "province_name",
            {"user_id": user_id},
        )

        tracking_days = await TraceStore.count_tracking_days(
            user_id,
            get_stats_timezone().key,
        )

        stats = TraceStats(
            totalCities=total_cities,
            totalProvinces=len({p for p in provinces if p}),
            totalDistance=0,
            trackingDays=tracking_days,
        )
        logger.debug("Stats for user %s: %s", user_id, stats)
        return stats
