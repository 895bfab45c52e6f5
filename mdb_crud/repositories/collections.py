"""
Collection name binding.

Each entity type declares its physical collection with the ``collection``
decorator. Bindings live in a static table filled at import time. A subclass
without its own binding uses the nearest bound base class.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

_collection_registry: dict[type, str] = {}


def collection(name: str) -> Callable[[C], C]:
    """
    Bind an entity type to a collection name.

    Example:
        @collection("users")
        @dataclass(kw_only=True)
        class User(TrackedEntity):
            email: str
    """
    if not name or not isinstance(name, str):
        raise ConfigurationError(
            "Collection name must be a non-empty string", config_value=name
        )

    def decorator(entity_class: C) -> C:
        register_collection(entity_class, name)
        return entity_class

    return decorator


def register_collection(entity_class: type, name: str) -> None:
    """
    Register a collection name for an entity type.

    Registering the same name twice is allowed; rebinding to a different
    name raises ConfigurationError.
    """
    existing = _collection_registry.get(entity_class)
    if existing is not None and existing != name:
        raise ConfigurationError(
            f"{entity_class.__name__} is already bound to collection '{existing}'",
            config_key="collection_name",
            config_value=name,
        )
    _collection_registry[entity_class] = name
    logger.debug(f"Bound {entity_class.__name__} to collection '{name}'")


def get_collection_name(entity_class: type) -> str | None:
    """Return the collection name bound to entity_class or its nearest base, else None."""
    for klass in entity_class.__mro__:
        name = _collection_registry.get(klass)
        if name is not None:
            return name
    return None


def unregister_collection(entity_class: type) -> None:
    """Remove a binding (used by tests)."""
    _collection_registry.pop(entity_class, None)
