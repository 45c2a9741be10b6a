"""
Database connection manager module.

Provides a singleton DatabaseManager class that owns the Motor client,
rebinds it when the event loop changes and initializes Beanie.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from datetime import UTC
from typing import Any, Final, Self

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI: Final[str] = "mongodb://mongo:27017"
DEFAULT_DB_NAME: Final[str] = "footprint"


def get_mongo_uri() -> str:
    return os.getenv("MONGODB_URI", "").strip() or DEFAULT_MONGO_URI


class DatabaseManager:
    """
    Singleton class to manage the MongoDB client and database connection.

    Environment Variables:
        MONGODB_URI: MongoDB URI (default: mongodb://mongo:27017)
        MONGODB_DATABASE: Database name (default: footprint)
        MONGODB_MAX_POOL_SIZE: Connection pool size (default: 50)
        MONGODB_CONNECTION_TIMEOUT_MS: Connection timeout (default: 5000)
        MONGODB_SERVER_SELECTION_TIMEOUT_MS: Server selection timeout (default: 10000)
        MONGODB_SOCKET_TIMEOUT_MS: Socket timeout (default: 30000)
    """

    _instance: DatabaseManager | None = None
    _lock = threading.Lock()

    def __new__(cls) -> Self:
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None
        self._bound_loop: asyncio.AbstractEventLoop | None = None
        self._connection_healthy = True
        self._beanie_initialized = False
        self._initialized = True

        self._max_pool_size = int(os.getenv("MONGODB_MAX_POOL_SIZE", "50"))
        self._connection_timeout_ms = int(
            os.getenv("MONGODB_CONNECTION_TIMEOUT_MS", "5000"),
        )
        self._server_selection_timeout_ms = int(
            os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "10000"),
        )
        self._socket_timeout_ms = int(os.getenv("MONGODB_SOCKET_TIMEOUT_MS", "30000"))
        self._db_name = os.getenv("MONGODB_DATABASE", DEFAULT_DB_NAME)

    def _client_kwargs(self, mongo_uri: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "tz_aware": True,
            "tzinfo": UTC,
            "maxPoolSize": self._max_pool_size,
            "minPoolSize": 0,
            "connectTimeoutMS": self._connection_timeout_ms,
            "serverSelectionTimeoutMS": self._server_selection_timeout_ms,
            "socketTimeoutMS": self._socket_timeout_ms,
            "retryWrites": True,
            "retryReads": True,
            "appname": "Footprint",
        }
        # Atlas connections need an explicit CA bundle
        if mongo_uri.startswith("mongodb+srv://"):
            kwargs.update(tls=True, tlsCAFile=certifi.where())
        return kwargs

    def _initialize_client(self) -> None:
        try:
            mongo_uri = get_mongo_uri()
            self._client = AsyncIOMotorClient(
                mongo_uri,
                **self._client_kwargs(mongo_uri),
            )
            self._db = self._client[self._db_name]
            self._connection_healthy = True
            logger.info("MongoDB client initialized for database %s", self._db_name)
        except Exception:
            self._connection_healthy = False
            logger.exception("Failed to initialize MongoDB client")
            raise

    @staticmethod
    def _get_current_loop() -> asyncio.AbstractEventLoop | None:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _reset_client(self) -> None:
        if self._client:
            try:
                self._client.close()
            except Exception as e:
                logger.warning("Error closing MongoDB client: %s", str(e))
        self._client = None
        self._db = None
        self._bound_loop = None
        self._beanie_initialized = False

    def _check_loop_and_reconnect(self) -> None:
        """Motor clients are bound to one loop; rebuild when it changes."""
        if self._client is None or self._bound_loop is None:
            return
        current_loop = self._get_current_loop()
        if self._bound_loop.is_closed() or (
            current_loop is not None and current_loop is not self._bound_loop
        ):
            logger.info("Event loop changed, reconnecting MongoDB client")
            self._reset_client()

    @property
    def db(self) -> AsyncIOMotorDatabase:
        self._check_loop_and_reconnect()
        if self._db is None or not self._connection_healthy:
            self._initialize_client()
            self._bound_loop = self._get_current_loop()
        if self._db is None:
            msg = "Database instance could not be initialized."
            raise RuntimeError(msg)
        return self._db

    @property
    def connection_healthy(self) -> bool:
        return self._connection_healthy

    async def ping(self) -> bool:
        """Round-trip to the server; marks the connection unhealthy on failure."""
        try:
            await self.db.command("ping")
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", e)
            self._connection_healthy = False
            return False
        self._connection_healthy = True
        return True

    async def init_beanie(self) -> None:
        """Initialize Beanie ODM with all document models (creates indexes)."""
        self._check_loop_and_reconnect()
        if self._beanie_initialized and self._db is not None:
            logger.debug("Beanie already initialized, skipping")
            return

        from beanie import init_beanie

        from db.models import ALL_DOCUMENT_MODELS

        await init_beanie(database=self.db, document_models=ALL_DOCUMENT_MODELS)
        self._beanie_initialized = True
        logger.info(
            "Beanie ODM initialized with %d document models",
            len(ALL_DOCUMENT_MODELS),
        )

    async def cleanup_connections(self) -> None:
        """Clean up MongoDB client connections."""
        if self._client:
            logger.info("Closing MongoDB client connections...")
        self._reset_client()
        self._connection_healthy = False


# Singleton instance
db_manager = DatabaseManager()
