"""
MDB CRUD Repository Pattern

Provides the entity base classes, collection binding, the generic MongoDB
repository and the Unit of Work that caches repositories per request.

Usage:
    from dataclasses import dataclass
    from mdb_crud.repositories import TrackedEntity, UnitOfWork, collection

    @collection("users")
    @dataclass(kw_only=True)
    class User(TrackedEntity):
        email: str
        name: str = ""

    with UnitOfWork(db_factory) as uow:
        uow.repository(User).add(User(email="john@example.com"))
"""

from .base import Entity, Repository, TrackedEntity, is_tracked
from .collections import collection, get_collection_name, register_collection
from .mongo import MongoRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "Repository",
    "Entity",
    "TrackedEntity",
    "is_tracked",
    "collection",
    "get_collection_name",
    "register_collection",
    "MongoRepository",
    "UnitOfWork",
]
