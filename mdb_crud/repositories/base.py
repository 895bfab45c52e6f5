"""
Abstract Repository Pattern

Defines the entity base classes and the repository interface that the
service layer works against. Every operation comes in a blocking form and an
async form (``*_async``) with identical semantics.
"""

import dataclasses
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from ..constants import ID_FIELD

Filter = dict[str, Any]


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time, truncated to the millisecond precision BSON stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(kw_only=True)
class Entity:
    """
    Base class for stored documents.

    Plain entities only carry an id and are physically removed on delete.
    Subclass TrackedEntity instead to get soft-delete and timestamps.

    Example:
        @collection("audit_events")
        @dataclass(kw_only=True)
        class AuditEvent(Entity):
            action: str
    """

    id: str = field(default_factory=new_id)

    def to_document(self) -> dict[str, Any]:
        """Convert entity to a document for storage."""
        data = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[ID_FIELD if f.name == "id" else f.name] = value
        return data

    @classmethod
    def from_document(cls, data: dict[str, Any] | None) -> "Entity | None":
        """Create entity from a stored document, ignoring unknown keys."""
        if data is None:
            return None

        data = dict(data)
        if ID_FIELD in data:
            data["id"] = data.pop(ID_FIELD)

        field_names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in field_names})


@dataclass(kw_only=True)
class TrackedEntity(Entity):
    """
    Entity with soft-delete and timestamp bookkeeping.

    date_created is stamped once when the entity is added. date_updated is
    stamped on add and on every update or delete. Deletes flip is_deleted
    instead of removing the document.
    """

    is_deleted: bool = False
    date_created: datetime = field(default_factory=utc_now)
    date_updated: datetime = field(default_factory=utc_now)


def is_tracked(entity_class: type) -> bool:
    """Whether an entity type carries the tracking fields."""
    return isinstance(entity_class, type) and issubclass(entity_class, TrackedEntity)


T = TypeVar("T", bound=Entity)


class Repository(ABC, Generic[T]):
    """
    Abstract repository interface for one entity type.

    Filters are MongoDB-style filter documents. Reads return soft-deleted
    documents too; callers that want to hide them add
    ``{"is_deleted": False}`` to their filter.
    """

    # --- blocking API ---

    @abstractmethod
    def get_all(self) -> list[T]:
        """Get all entities."""

    @abstractmethod
    def get_many(self, filter: Filter) -> list[T]:
        """Get entities matching a filter."""

    @abstractmethod
    def get(self, filter: Filter) -> T | None:
        """Get the first entity matching a filter."""

    @abstractmethod
    def get_by_id(self, id: Any) -> T | None:
        """Get entity by id."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Add new entity."""

    @abstractmethod
    def update(self, entity: T, id: Any) -> None:
        """Replace the entity stored under id."""

    @abstractmethod
    def delete(self, entity: T, id: Any) -> None:
        """Delete the entity stored under id."""

    @abstractmethod
    def delete_by_id(self, id: Any) -> None:
        """Delete an entity by id."""

    @abstractmethod
    def delete_many(self, filter: Filter) -> None:
        """Delete every entity matching a filter."""

    @abstractmethod
    def delete_range(self, entities: Iterable[T]) -> None:
        """Delete the given entities."""

    # --- async API ---

    @abstractmethod
    async def get_all_async(self) -> list[T]:
        """
        Get all entities.

        Returns:
            Every stored entity, soft-deleted ones included
        """

    @abstractmethod
    async def get_many_async(self, filter: Filter) -> list[T]:
        """
        Get entities matching a filter.

        Args:
            filter: MongoDB-style filter dictionary

        Returns:
            List of matching entities
        """

    @abstractmethod
    async def get_async(self, filter: Filter) -> T | None:
        """
        Get the first entity matching a filter.

        Args:
            filter: MongoDB-style filter dictionary

        Returns:
            First matching entity or None
        """

    @abstractmethod
    async def get_by_id_async(self, id: Any) -> T | None:
        """
        Get entity by id.

        Args:
            id: Entity id

        Returns:
            Entity if found, None otherwise
        """

    @abstractmethod
    async def add_async(self, entity: T) -> None:
        """
        Add new entity.

        Args:
            entity: Fully populated entity to insert
        """

    @abstractmethod
    async def update_async(self, entity: T, id: Any) -> None:
        """
        Replace the entity stored under id.

        Args:
            entity: Replacement entity
            id: Id of the document to replace
        """

    @abstractmethod
    async def delete_async(self, entity: T, id: Any) -> None:
        """
        Delete the entity stored under id.

        Args:
            entity: Entity written back for tracked types
            id: Id of the document to delete
        """

    @abstractmethod
    async def delete_by_id_async(self, id: Any) -> None:
        """
        Delete an entity by id.

        Args:
            id: Entity id
        """

    @abstractmethod
    async def delete_many_async(self, filter: Filter) -> None:
        """
        Delete every entity matching a filter.

        Args:
            filter: MongoDB-style filter dictionary
        """

    @abstractmethod
    async def delete_range_async(self, entities: Iterable[T]) -> None:
        """
        Delete the given entities.

        Args:
            entities: Entities to delete
        """
