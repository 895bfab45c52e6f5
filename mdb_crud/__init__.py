"""
MDB_CRUD - generic CRUD scaffolding over MongoDB

Generic repository with soft-delete semantics, a per-request Unit of Work,
a generic service layer with model mapping, and a FastAPI boundary.
"""

from .config import CrudConfig, MongoDbSetting
from .database import DbFactory, MongoDbContext
from .exceptions import (
    ConfigurationError,
    InitializationError,
    MdbCrudError,
    NotFoundError,
    ServiceError,
    UnitOfWorkDisposedError,
)
from .repositories import (
    Entity,
    MongoRepository,
    Repository,
    TrackedEntity,
    UnitOfWork,
    collection,
    get_collection_name,
)
from .schemas import PagingResponse, ResultResponse
from .services import BaseService, Mapper

__version__ = "0.1.0"

__all__ = [
    # Config
    "CrudConfig",
    "MongoDbSetting",
    # Database
    "DbFactory",
    "MongoDbContext",
    # Repositories
    "Entity",
    "TrackedEntity",
    "Repository",
    "MongoRepository",
    "UnitOfWork",
    "collection",
    "get_collection_name",
    # Services
    "BaseService",
    "Mapper",
    "PagingResponse",
    "ResultResponse",
    # Errors
    "MdbCrudError",
    "ConfigurationError",
    "InitializationError",
    "NotFoundError",
    "ServiceError",
    "UnitOfWorkDisposedError",
]
