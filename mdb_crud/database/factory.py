"""
Process-level factory for the shared MongoDB context.

One DbFactory is created at application startup; every UnitOfWork built
during request handling asks it for the same MongoDbContext.
"""

import logging
import threading
from typing import Any

from ..config import MongoDbSetting
from .context import MongoDbContext

logger = logging.getLogger(__name__)


class DbFactory:
    """
    Lazily creates and owns the shared MongoDbContext.

    Usage:
        factory = DbFactory(CrudConfig().to_setting())
        with UnitOfWork(factory) as uow:
            ...
        factory.close()  # at shutdown
    """

    def __init__(self, setting: MongoDbSetting, client: Any | None = None) -> None:
        self.setting = setting
        self._client = client
        self._context: MongoDbContext | None = None
        # Requests may hit init() from several threads at startup
        self._init_lock = threading.Lock()

    def init(self) -> MongoDbContext:
        """Return the shared context, creating it on first use."""
        if self._context is not None and not self._context.closed:
            return self._context

        with self._init_lock:
            if self._context is None or self._context.closed:
                self._context = MongoDbContext(self.setting, client=self._client)
                logger.debug("DbFactory created a new MongoDbContext")
        return self._context

    def close(self) -> None:
        """Close the shared context if one was created."""
        if self._context is not None:
            self._context.close()
            self._context = None

    def __enter__(self) -> "DbFactory":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
