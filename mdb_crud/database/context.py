"""
MongoDB context: the document store handle.

Wraps one motor client and exposes the configured database plus a
collection accessor per entity collection. Async operations go through the
motor collection; blocking operations use the pymongo collection that the
motor object delegates to, so both share one connection pool.

This module is part of MDB_CRUD.
"""

import logging
from datetime import timezone
from typing import Any

from bson.codec_options import CodecOptions
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.collection import Collection
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import ConnectionFailure, InvalidURI

from ..config import MongoDbSetting
from ..constants import APP_NAME, DEFAULT_MAX_IDLE_TIME_MS
from ..exceptions import InitializationError
from ..observability import get_logger as get_contextual_logger

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

# BSON datetimes are UTC; decode them as aware datetimes
DOCUMENT_CODEC_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)


class MongoDbContext:
    """
    Document store handle for one database.

    Example:
        context = MongoDbContext(MongoDbSetting(
            connection_string="mongodb://localhost:27017",
            database_name="gateway",
        ))
        users = context.collection("users")
        await users.find_one({"_id": user_id})
    """

    def __init__(
        self,
        setting: MongoDbSetting,
        client: Any | None = None,
    ) -> None:
        """
        Initialize the context.

        Args:
            setting: Connection settings
            client: Optional pre-built motor client (the context then does
                not own its lifetime details beyond close())

        Raises:
            InitializationError: If the motor client cannot be created
        """
        self.setting = setting
        self._closed = False

        if client is None:
            try:
                client = AsyncIOMotorClient(
                    setting.connection_string,
                    serverSelectionTimeoutMS=setting.server_selection_timeout_ms,
                    appname=APP_NAME,
                    maxPoolSize=setting.max_pool_size,
                    minPoolSize=setting.min_pool_size,
                    maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
                    retryWrites=True,
                    retryReads=True,
                )
            except (InvalidURI, PyMongoConfigurationError, ValueError, TypeError) as e:
                logger.error(f"Failed to create MongoDB client: {e}", exc_info=True)
                raise InitializationError(
                    f"Failed to create MongoDB client: {e}",
                    mongo_uri=setting.connection_string,
                    db_name=setting.database_name,
                    context={"error_type": type(e).__name__},
                ) from e

        self._client = client
        self._database: AsyncIOMotorDatabase = client.get_database(
            setting.database_name, codec_options=DOCUMENT_CODEC_OPTIONS
        )

        contextual_logger.info(
            "MongoDB context created",
            extra={
                "db_name": setting.database_name,
                "max_pool_size": setting.max_pool_size,
                "min_pool_size": setting.min_pool_size,
            },
        )

    @property
    def client(self) -> Any:
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """The configured motor database."""
        return self._database

    @property
    def closed(self) -> bool:
        return self._closed

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Get the async (motor) collection for a collection name."""
        return self._database[name]

    def sync_collection(self, name: str) -> Collection:
        """Get the blocking (pymongo) collection behind the motor collection."""
        return self.collection(name).delegate

    async def ping(self) -> bool:
        """
        Check that the server answers.

        Returns:
            True if the server responded, False otherwise
        """
        try:
            await self._client.admin.command("ping")
            return True
        except ConnectionFailure as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        """Close the underlying client. Safe to call more than once."""
        if self._closed:
            return
        self._client.close()
        self._closed = True
        logger.info(f"MongoDB context for '{self.setting.database_name}' closed")
