"""
MongoDB logging handler that stores application logs in ``server_logs``.

Records are written through the Beanie ``ServerLog`` model so the TTL and
level indexes declared there apply.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from core.date_utils import get_current_utc_time
from db.models import ServerLog


class MongoDBHandler(logging.Handler):
    """Logging handler that schedules inserts on the running event loop."""

    def __init__(self) -> None:
        super().__init__()
        self._pending: set[asyncio.Task] = set()
        self._ready = False

    async def setup_indexes(self) -> None:
        """Indexes come from ``ServerLog.Settings``; this just verifies access."""
        try:
            await ServerLog.find_one()
            self._ready = True
        except Exception as e:
            logging.getLogger(__name__).warning(
                "MongoDB log handler unavailable: %s",
                e,
            )

    def emit(self, record: logging.LogRecord) -> None:
        if not self._ready or record.name.startswith(("pymongo", "motor")):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. a worker thread); console handlers still see it.
            return
        try:
            entry = self._build_entry(record)
            task = loop.create_task(self._insert(entry))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        except Exception:
            self.handleError(record)

    async def flush_pending(self) -> None:
        """Wait for scheduled inserts to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @staticmethod
    async def _insert(entry: ServerLog) -> None:
        with contextlib.suppress(Exception):
            await entry.insert()

    def _build_entry(self, record: logging.LogRecord) -> ServerLog:
        exc_text = None
        if record.exc_info:
            exc_text = logging.Formatter().formatException(record.exc_info)
        return ServerLog(
            timestamp=get_current_utc_time(),
            level=record.levelname,
            logger_name=record.name,
            message=record.getMessage(),
            pathname=record.pathname,
            lineno=record.lineno,
            funcName=record.funcName,
            exc_info=exc_text,
        )
