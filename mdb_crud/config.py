"""
Configuration management for MDB_CRUD.

MongoDbSetting is the plain connection setting handed to the store handle.
CrudConfig resolves it from explicit arguments or environment variables
and validates it before a DbFactory is built.
"""

import os

from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    MIN_SERVER_SELECTION_TIMEOUT_MS,
)
from .exceptions import ConfigurationError


def _int_setting(value: int | None, env_var: str, default: int) -> int:
    """Explicit value if given (0 included), else the env var, else default."""
    if value is not None:
        return value
    return int(os.getenv(env_var, str(default)))


class MongoDbSetting(BaseModel):
    """Connection settings for one MongoDB database."""

    connection_string: str = Field(..., description="MongoDB connection URI")
    database_name: str = Field(..., description="Database name")
    collection_name: str | None = Field(
        default=None, description="Optional default collection name"
    )
    max_pool_size: int = Field(DEFAULT_MAX_POOL_SIZE, ge=1)
    min_pool_size: int = Field(DEFAULT_MIN_POOL_SIZE, ge=0)
    server_selection_timeout_ms: int = Field(
        DEFAULT_SERVER_SELECTION_TIMEOUT_MS, ge=MIN_SERVER_SELECTION_TIMEOUT_MS
    )


class CrudConfig:
    """
    MDB_CRUD configuration.

    Every value can be passed directly; anything left out is read from the
    environment.

    Example:
        # Using environment variables
        config = CrudConfig()
        config.validate()
        factory = DbFactory(config.to_setting())

        # Or using direct parameters
        config = CrudConfig(mongo_uri="mongodb://localhost:27017", db_name="my_db")
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            db_name: Database name (defaults to DB_NAME env var)
            max_pool_size: Maximum connection pool size (defaults to 50 or MONGO_MAX_POOL_SIZE)
            min_pool_size: Minimum connection pool size (defaults to 10 or MONGO_MIN_POOL_SIZE)
            server_selection_timeout_ms: Server selection timeout in ms (defaults to 5000)
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "")
        self.db_name = db_name or os.getenv("DB_NAME", "")
        self.max_pool_size = _int_setting(
            max_pool_size, "MONGO_MAX_POOL_SIZE", DEFAULT_MAX_POOL_SIZE
        )
        self.min_pool_size = _int_setting(
            min_pool_size, "MONGO_MIN_POOL_SIZE", DEFAULT_MIN_POOL_SIZE
        )
        self.server_selection_timeout_ms = _int_setting(
            server_selection_timeout_ms,
            "MONGO_SERVER_SELECTION_TIMEOUT_MS",
            DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )

        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.server_selection_timeout_ms < MIN_SERVER_SELECTION_TIMEOUT_MS:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= {MIN_SERVER_SELECTION_TIMEOUT_MS}, "
                f"got {self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

    def to_setting(self) -> MongoDbSetting:
        """Validate and build the connection setting for a DbFactory."""
        self.validate()
        return MongoDbSetting(
            connection_string=self.mongo_uri,
            database_name=self.db_name,
            max_pool_size=self.max_pool_size,
            min_pool_size=self.min_pool_size,
            server_selection_timeout_ms=self.server_selection_timeout_ms,
        )
