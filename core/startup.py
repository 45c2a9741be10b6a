"""Process start/stop for the Footprint service."""

from __future__ import annotations

import logging

from config import get_amap_api_key, get_stats_timezone, mongo_logging_enabled
from core.http.session import close_session
from db import db_manager
from db.logging_handler import MongoDBHandler

logger = logging.getLogger(__name__)


class FootprintRuntime:
    """
    Owns what the app sets up at startup and must release at shutdown.

    Startup binds Beanie to the configured database, reports how place
    resolution and stats bucketing are configured and, when
    ``MONGO_LOGGING_ENABLED`` is on, mirrors log records into ``server_logs``.
    """

    def __init__(self) -> None:
        self.log_handler: MongoDBHandler | None = None

    async def start(self, handler_level: int = logging.INFO) -> None:
        await db_manager.init_beanie()

        if get_amap_api_key():
            logger.info("Reverse geocoding through Amap is enabled")
        else:
            logger.warning(
                "AMAP_API_KEY is not set; samples without names are stored "
                "under the unknown city",
            )
        logger.info("Tracking days are counted in %s", get_stats_timezone().key)

        if mongo_logging_enabled():
            handler = MongoDBHandler()
            await handler.setup_indexes()
            handler.setLevel(handler_level)
            logging.getLogger().addHandler(handler)
            self.log_handler = handler

    async def stop(self) -> None:
        handler, self.log_handler = self.log_handler, None
        if handler is not None:
            await handler.flush_pending()
            logging.getLogger().removeHandler(handler)
            handler.close()
        await close_session()
        await db_manager.cleanup_connections()
