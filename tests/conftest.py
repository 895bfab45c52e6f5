"""
Pytest configuration and shared fixtures for MDB_CRUD tests.

This module provides:
- In-memory stand-ins for motor / pymongo clients, databases and collections
- DbFactory, UnitOfWork and Mapper fixtures built on top of them
"""

from typing import Any, Dict, Iterator, List, Optional
from unittest.mock import AsyncMock, MagicMock

import bson
import pytest
from bson.codec_options import CodecOptions
from pymongo.errors import DuplicateKeyError

from mdb_crud.config import MongoDbSetting
from mdb_crud.database import DbFactory
from mdb_crud.repositories import UnitOfWork
from mdb_crud.services import Mapper

# ============================================================================
# IN-MEMORY MONGODB
# ============================================================================


def _matches(doc: Dict[str, Any], filter: Optional[Dict[str, Any]]) -> bool:
    """Exact-match filtering on top-level fields."""
    for key, value in (filter or {}).items():
        if key not in doc or doc[key] != value:
            return False
    return True


class FakeStore:
    """
    Documents of one collection, shared by its sync and async views.

    Documents go through BSON on the way in and out, so reads come back with
    the types and codec options a real server connection would produce.
    """

    def __init__(self, codec_options: Optional[CodecOptions] = None) -> None:
        self.codec_options = codec_options or CodecOptions()
        self.docs: Dict[Any, Dict[str, Any]] = {}
        self.writes = 0

    def find(self, filter: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self._decode(d) for d in self.docs.values() if _matches(d, filter)]

    def _decode(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return bson.decode(bson.encode(doc), codec_options=self.codec_options)

    def _stored_form(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return bson.decode(bson.encode(doc))

    def find_one(self, filter: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        found = self.find(filter)
        return found[0] if found else None

    def insert_one(self, doc: Dict[str, Any]) -> MagicMock:
        if doc["_id"] in self.docs:
            raise DuplicateKeyError(f"duplicate key: {doc['_id']}")
        self.writes += 1
        self.docs[doc["_id"]] = self._stored_form(doc)
        return MagicMock(inserted_id=doc["_id"])

    def find_one_and_replace(
        self, filter: Dict[str, Any], replacement: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        existing = self.find_one(filter)
        if existing is None:
            return None
        self.writes += 1
        replacement = self._stored_form(replacement)
        replacement.setdefault("_id", existing["_id"])
        self.docs[existing["_id"]] = replacement
        return existing

    def find_one_and_delete(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        existing = self.find_one(filter)
        if existing is None:
            return None
        self.writes += 1
        del self.docs[existing["_id"]]
        return existing


class FakeSyncCollection:
    """Blocking (pymongo-shaped) view of a FakeStore."""

    def __init__(self, name: str, store: FakeStore) -> None:
        self.name = name
        self.store = store

    def find(self, filter: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        return iter(self.store.find(filter))

    def find_one(self, filter: Optional[Dict[str, Any]] = None):
        return self.store.find_one(filter)

    def insert_one(self, doc):
        return self.store.insert_one(doc)

    def find_one_and_replace(self, filter, replacement):
        return self.store.find_one_and_replace(filter, replacement)

    def find_one_and_delete(self, filter):
        return self.store.find_one_and_delete(filter)


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._docs if length is None else self._docs[:length]


class FakeAsyncCollection:
    """Async (motor-shaped) view of a FakeStore."""

    def __init__(self, name: str, store: FakeStore) -> None:
        self.name = name
        self.store = store
        self.delegate = FakeSyncCollection(name, store)

    def find(self, filter: Optional[Dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor(self.store.find(filter))

    async def find_one(self, filter: Optional[Dict[str, Any]] = None):
        return self.store.find_one(filter)

    async def insert_one(self, doc):
        return self.store.insert_one(doc)

    async def find_one_and_replace(self, filter, replacement):
        return self.store.find_one_and_replace(filter, replacement)

    async def find_one_and_delete(self, filter):
        return self.store.find_one_and_delete(filter)


class FakeDatabase:
    def __init__(self, name: str, codec_options: Optional[CodecOptions] = None) -> None:
        self.name = name
        self.codec_options = codec_options
        self._collections: Dict[str, FakeAsyncCollection] = {}

    def __getitem__(self, name: str) -> FakeAsyncCollection:
        if name not in self._collections:
            self._collections[name] = FakeAsyncCollection(name, FakeStore(self.codec_options))
        return self._collections[name]


class FakeClient:
    """Stand-in for AsyncIOMotorClient."""

    def __init__(self) -> None:
        self._databases: Dict[str, FakeDatabase] = {}
        self.admin = MagicMock()
        self.admin.command = AsyncMock(return_value={"ok": 1})
        self.close = MagicMock()

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self._databases:
            self._databases[name] = FakeDatabase(name)
        return self._databases[name]

    def get_database(
        self, name: str, codec_options: Optional[CodecOptions] = None
    ) -> FakeDatabase:
        database = self[name]
        if codec_options is not None:
            database.codec_options = codec_options
            for collection in database._collections.values():
                collection.store.codec_options = codec_options
        return database


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mongo_setting() -> MongoDbSetting:
    return MongoDbSetting(
        connection_string="mongodb://localhost:27017",
        database_name="test_db",
    )


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def db_factory(mongo_setting, fake_client) -> Iterator[DbFactory]:
    factory = DbFactory(mongo_setting, client=fake_client)
    yield factory
    factory.close()


@pytest.fixture
def db_context(db_factory):
    return db_factory.init()


@pytest.fixture
def unit_of_work(db_factory) -> Iterator[UnitOfWork]:
    uow = UnitOfWork(db_factory)
    yield uow
    uow.dispose()


@pytest.fixture
def mapper() -> Mapper:
    return Mapper()


@pytest.fixture
def store_for(fake_client, mongo_setting):
    """Return the FakeStore behind a collection name."""

    def _store(collection_name: str) -> FakeStore:
        return fake_client[mongo_setting.database_name][collection_name].store

    return _store
