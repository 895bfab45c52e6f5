"""
Database layer.

Provides the shared MongoDB store handle and the factory that owns it.
"""

from .context import MongoDbContext
from .factory import DbFactory

__all__ = [
    "MongoDbContext",
    "DbFactory",
]
