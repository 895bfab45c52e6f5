"""
Generic CRUD service.

Type parameters:
    TE: Entity
    TF: Filter model
    TV: View model
    TA: Add model
    TU: Update model
"""

from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

from ..exceptions import ConfigurationError, NotFoundError
from ..observability import get_logger, log_operation
from ..repositories.base import Entity, Repository
from ..repositories.unit_of_work import UnitOfWork
from ..schemas import PagingResponse
from .mapping import Mapper

contextual_logger = get_logger(__name__)

TE = TypeVar("TE", bound=Entity)
TF = TypeVar("TF")
TV = TypeVar("TV")
TA = TypeVar("TA")
TU = TypeVar("TU")


class BaseService(Generic[TE, TF, TV, TA, TU]):
    """
    Translates application operations into repository calls.

    Subclasses set ``entity_class`` and ``view_model_class``:

        class UserService(BaseService[User, UserFilter, UserView, UserAdd, UserUpdate]):
            entity_class = User
            view_model_class = UserView

    The service is the only layer that turns a missing entity into
    NotFoundError.
    """

    entity_class: ClassVar[type[Entity]]
    view_model_class: ClassVar[type]

    def __init__(
        self,
        mapper: Mapper,
        unit_of_work: UnitOfWork,
        repository: Repository[TE] | None = None,
    ):
        if getattr(self, "entity_class", None) is None or getattr(
            self, "view_model_class", None
        ) is None:
            raise ConfigurationError(
                f"{type(self).__name__} must define entity_class and view_model_class"
            )
        self._mapper = mapper
        self._unit_of_work = unit_of_work
        self._repository: Repository[TE] = repository or unit_of_work.repository(
            self.entity_class
        )

    @property
    def repository(self) -> Repository[TE]:
        return self._repository

    async def _get_existing(self, id: Any, operation: str) -> TE:
        entity = await self._repository.get_by_id_async(_normalize_id(id))
        if entity is None:
            log_operation(
                contextual_logger,
                f"{self.entity_class.__name__}.{operation}",
                success=False,
                reason="not_found",
                entity_id=str(id),
            )
            raise NotFoundError(entity=self.entity_class.__name__, entity_id=str(id))
        return entity

    async def add(self, model: TA) -> Any:
        """Map and persist a new entity. Returns nothing; callers re-fetch."""
        entity = self._mapper.map(model, self.entity_class)
        await self._repository.add_async(entity)
        return None

    async def update(self, model: TU, id: Any) -> Any:
        """
        Overlay the update model onto the stored entity and persist it.

        Raises:
            NotFoundError: If no entity is stored under id (nothing is written)
        """
        entity = await self._get_existing(id, "update")
        entity = self._mapper.map_onto(model, entity)
        await self._repository.update_async(entity, _normalize_id(id))
        return id

    async def delete(self, id: Any) -> Any:
        """
        Delete the entity stored under id.

        Raises:
            NotFoundError: If no entity is stored under id
        """
        await self._get_existing(id, "delete")
        await self._repository.delete_by_id_async(_normalize_id(id))
        return id

    async def get(self, id: Any) -> TV:
        """
        Get the view model for the entity stored under id.

        Raises:
            NotFoundError: If no entity is stored under id
        """
        entity = await self._get_existing(id, "get")
        return self._mapper.map(entity, self.view_model_class)

    async def get_paged_result(self, filter: TF, user_id: Any) -> PagingResponse[TV]:
        """
        Return a page of view models.

        The default page is every stored entity: filter and user_id are not
        applied. Override _query_page to add real filtering or paging.
        """
        entities, total = await self._query_page(filter, user_id)
        return PagingResponse(
            data=self._mapper.map_many(entities, self.view_model_class),
            total_counts=total,
        )

    async def _query_page(self, filter: TF, user_id: Any) -> tuple[list[TE], int]:
        entities = await self._repository.get_all_async()
        return entities, len(entities)


def _normalize_id(id: Any) -> Any:
    # Ids are stored as strings
    return str(id) if isinstance(id, UUID) else id
