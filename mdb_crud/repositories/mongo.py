"""
MongoDB Repository Implementation

Implements the Repository interface over one MongoDB collection. Async
methods use the motor collection; blocking methods use the pymongo
collection behind it.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..constants import ID_FIELD
from ..exceptions import ConfigurationError
from .base import Entity, Filter, Repository, is_tracked, utc_now
from .collections import get_collection_name

if TYPE_CHECKING:
    from ..database.context import MongoDbContext

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)


def filter_id(id: Any) -> Filter:
    """Identity filter for a document id."""
    return {ID_FIELD: id}


class MongoRepository(Repository[T], Generic[T]):
    """
    MongoDB implementation of the Repository interface.

    Tracked entities (TrackedEntity subclasses) get timestamps stamped on
    writes and are soft-deleted; plain entities are physically removed.

    Example:
        users = MongoRepository(context, User)

        await users.add_async(User(email="john@example.com"))
        admins = await users.get_many_async({"role": "admin"})
        users.delete_by_id(user_id)
    """

    def __init__(
        self,
        context: "MongoDbContext",
        entity_class: type[T],
        collection_name: str | None = None,
    ):
        """
        Initialize the MongoDB repository.

        Args:
            context: Shared store handle
            entity_class: Entity subclass for this repository
            collection_name: Collection override; defaults to the name bound
                with @collection

        Raises:
            ConfigurationError: If the entity type has no collection binding
        """
        collection_name = collection_name or get_collection_name(entity_class)
        if not collection_name:
            raise ConfigurationError(
                f"No collection bound to {entity_class.__name__}; "
                f"decorate it with @collection('<name>')",
                config_key="collection_name",
                context={"entity": entity_class.__name__},
            )

        self._context = context
        self._entity_class = entity_class
        self._tracked = is_tracked(entity_class)
        self.collection_name = collection_name
        self._collection = context.collection(collection_name)
        self._sync_collection = context.sync_collection(collection_name)

    @property
    def entity_class(self) -> type[T]:
        return self._entity_class

    @property
    def context(self) -> "MongoDbContext":
        return self._context

    def _to_entity(self, doc: dict[str, Any] | None) -> T | None:
        if doc is None:
            return None
        return self._entity_class.from_document(doc)

    def _to_entities(self, docs: Iterable[dict[str, Any]]) -> list[T]:
        return [self._to_entity(doc) for doc in docs]

    def _mark_deleted(self, entity: T) -> T:
        entity.is_deleted = True
        entity.date_updated = utc_now()
        return entity

    def _stamp_created(self, entity: T) -> None:
        if self._tracked:
            now = utc_now()
            entity.date_created = now
            entity.date_updated = now

    def _stamp_updated(self, entity: T) -> None:
        if self._tracked:
            entity.date_updated = utc_now()

    # ------------------------------------------------------------------
    # Blocking API
    # ------------------------------------------------------------------

    def get(self, filter: Filter) -> T | None:
        """Get the first entity matching a filter."""
        return self._to_entity(self._sync_collection.find_one(filter))

    def get_by_id(self, id: Any) -> T | None:
        """Get entity by id."""
        return self._to_entity(self._sync_collection.find_one(filter_id(id)))

    def get_many(self, filter: Filter) -> list[T]:
        """Get entities matching a filter."""
        return self._to_entities(self._sync_collection.find(filter))

    def get_all(self) -> list[T]:
        """Get all entities, soft-deleted ones included."""
        return self._to_entities(self._sync_collection.find({}))

    def add(self, entity: T) -> None:
        """Stamp and insert a new entity."""
        self._stamp_created(entity)
        self._sync_collection.insert_one(entity.to_document())
        logger.debug(f"Added {self._entity_class.__name__} with id={entity.id}")

    def update(self, entity: T, id: Any) -> None:
        """Replace the document stored under id with entity."""
        self._stamp_updated(entity)
        self._sync_collection.find_one_and_replace(filter_id(id), entity.to_document())
        logger.debug(f"Updated {self._entity_class.__name__} with id={id}")

    def delete(self, entity: T, id: Any) -> None:
        """
        Delete the document stored under id.

        Tracked types are not removed: the stored document is marked deleted
        and then replaced with the caller-supplied entity as given, so the
        deleted mark on the fetched copy is not what gets written. Plain
        types are removed. A missing id is a no-op.
        """
        existing = self.get_by_id(id)
        if existing is None:
            return

        if self._tracked:
            self._mark_deleted(existing)
            self._sync_collection.find_one_and_replace(filter_id(id), entity.to_document())
            logger.debug(f"Soft-deleted {self._entity_class.__name__} with id={id}")
            return

        self._sync_collection.find_one_and_delete(filter_id(id))
        logger.debug(f"Deleted {self._entity_class.__name__} with id={id}")

    def delete_by_id(self, id: Any) -> None:
        """Delete by id, persisting the deleted mark for tracked types."""
        existing = self.get_by_id(id)
        if existing is None:
            return

        if self._tracked:
            self._mark_deleted(existing)
            self._sync_collection.find_one_and_replace(filter_id(id), existing.to_document())
            logger.debug(f"Soft-deleted {self._entity_class.__name__} with id={id}")
            return

        self._sync_collection.find_one_and_delete(filter_id(id))
        logger.debug(f"Deleted {self._entity_class.__name__} with id={id}")

    def delete_many(self, filter: Filter) -> None:
        """Soft-delete every match. Plain types are left untouched."""
        if not self._tracked:
            return
        self.delete_range(self.get_many(filter))

    def delete_range(self, entities: Iterable[T]) -> None:
        """Soft-delete each supplied entity. Plain types are left untouched."""
        if not self._tracked:
            return
        count = 0
        for entity in entities:
            self._mark_deleted(entity)
            self._sync_collection.find_one_and_replace(
                filter_id(entity.id), entity.to_document()
            )
            count += 1
        logger.debug(f"Soft-deleted {count} {self._entity_class.__name__} entities")

    # ------------------------------------------------------------------
    # Async API
    # ------------------------------------------------------------------

    async def get_async(self, filter: Filter) -> T | None:
        """Get the first entity matching a filter."""
        return self._to_entity(await self._collection.find_one(filter))

    async def get_by_id_async(self, id: Any) -> T | None:
        """Get entity by id."""
        return self._to_entity(await self._collection.find_one(filter_id(id)))

    async def get_many_async(self, filter: Filter) -> list[T]:
        """Get entities matching a filter."""
        docs = await self._collection.find(filter).to_list(length=None)
        return self._to_entities(docs)

    async def get_all_async(self) -> list[T]:
        """Get all entities, soft-deleted ones included."""
        docs = await self._collection.find({}).to_list(length=None)
        return self._to_entities(docs)

    async def add_async(self, entity: T) -> None:
        """Stamp and insert a new entity."""
        self._stamp_created(entity)
        await self._collection.insert_one(entity.to_document())
        logger.debug(f"Added {self._entity_class.__name__} with id={entity.id}")

    async def update_async(self, entity: T, id: Any) -> None:
        """Replace the document stored under id with entity."""
        self._stamp_updated(entity)
        await self._collection.find_one_and_replace(filter_id(id), entity.to_document())
        logger.debug(f"Updated {self._entity_class.__name__} with id={id}")

    async def delete_async(self, entity: T, id: Any) -> None:
        """Async form of delete(); same write-back of the supplied entity."""
        existing = await self.get_by_id_async(id)
        if existing is None:
            return

        if self._tracked:
            self._mark_deleted(existing)
            await self._collection.find_one_and_replace(filter_id(id), entity.to_document())
            logger.debug(f"Soft-deleted {self._entity_class.__name__} with id={id}")
            return

        await self._collection.find_one_and_delete(filter_id(id))
        logger.debug(f"Deleted {self._entity_class.__name__} with id={id}")

    async def delete_by_id_async(self, id: Any) -> None:
        """Delete by id, persisting the deleted mark for tracked types."""
        existing = await self.get_by_id_async(id)
        if existing is None:
            return

        if self._tracked:
            self._mark_deleted(existing)
            await self._collection.find_one_and_replace(filter_id(id), existing.to_document())
            logger.debug(f"Soft-deleted {self._entity_class.__name__} with id={id}")
            return

        await self._collection.find_one_and_delete(filter_id(id))
        logger.debug(f"Deleted {self._entity_class.__name__} with id={id}")

    async def delete_many_async(self, filter: Filter) -> None:
        """Soft-delete every match. Plain types are left untouched."""
        if not self._tracked:
            return
        await self.delete_range_async(await self.get_many_async(filter))

    async def delete_range_async(self, entities: Iterable[T]) -> None:
        """Soft-delete each supplied entity. Plain types are left untouched."""
        if not self._tracked:
            return
        count = 0
        for entity in entities:
            self._mark_deleted(entity)
            await self._collection.find_one_and_replace(
                filter_id(entity.id), entity.to_document()
            )
            count += 1
        logger.debug(f"Soft-deleted {count} {self._entity_class.__name__} entities")


__all__ = ["MongoRepository", "filter_id"]
