"""
Unit of Work Pattern

Manages repository access for one logical operation (usually one request).
The UnitOfWork acts as a factory for repositories and caches one repository
per entity type for its lifetime.
"""

import logging
from typing import TYPE_CHECKING, TypeVar

from ..exceptions import UnitOfWorkDisposedError
from .base import Entity
from .mongo import MongoRepository

if TYPE_CHECKING:
    from ..database.context import MongoDbContext
    from ..database.factory import DbFactory

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)


class UnitOfWork:
    """
    Unit of Work for managing repository access.

    The UnitOfWork is request-scoped - one instance per HTTP request.
    Repositories are created lazily and cached for the duration of the
    request; all of them share the factory's MongoDbContext.

    Usage:
        with UnitOfWork(db_factory) as uow:
            users = uow.repository(User)
            users.add(User(email="john@example.com"))

        # In a route handler
        @app.get("/users/{user_id}")
        async def get_user(user_id: str, uow: UnitOfWork = Depends(get_unit_of_work)):
            return await uow.repository(User).get_by_id_async(user_id)
    """

    def __init__(self, db_factory: "DbFactory"):
        """
        Initialize the Unit of Work.

        Args:
            db_factory: Factory owning the shared store handle
        """
        self._db_factory = db_factory
        self._context: "MongoDbContext | None" = db_factory.init()
        self._repositories: dict[type, MongoRepository] = {}

    def repository(self, entity_class: type[T]) -> MongoRepository[T]:
        """
        Get or create the repository for an entity type.

        Args:
            entity_class: Entity subclass bound to a collection

        Returns:
            The cached repository instance for the type

        Raises:
            ConfigurationError: If the type has no collection binding
            UnitOfWorkDisposedError: If the UnitOfWork was disposed
        """
        if self._context is None:
            raise UnitOfWorkDisposedError(
                "UnitOfWork has been disposed", context={"entity": entity_class.__name__}
            )

        repo = self._repositories.get(entity_class)
        if repo is not None:
            return repo

        repo = MongoRepository(self._context, entity_class)
        self._repositories[entity_class] = repo

        logger.debug(
            f"Created repository for '{repo.collection_name}' "
            f"with entity {entity_class.__name__}"
        )
        return repo

    @property
    def db_context(self) -> "MongoDbContext":
        """
        Direct access to the shared store handle.

        Use this for operations not covered by the Repository interface,
        like aggregations or raw queries.
        """
        if self._context is None:
            raise UnitOfWorkDisposedError("UnitOfWork has been disposed")
        return self._context

    @property
    def disposed(self) -> bool:
        return self._context is None

    def dispose(self) -> None:
        """
        Dispose of the UnitOfWork: drop cached repositories and release the
        store handle reference. The shared client itself stays open; it
        belongs to the DbFactory.

        Called automatically at the end of a request scope.
        """
        self._repositories.clear()
        self._context = None
        logger.debug("UnitOfWork disposed")

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()
