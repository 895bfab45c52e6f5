"""
Unit tests for UnitOfWork and the collection binding it relies on.
"""

from dataclasses import dataclass

import pytest

from mdb_crud.exceptions import ConfigurationError, UnitOfWorkDisposedError
from mdb_crud.repositories import (
    Entity,
    MongoRepository,
    TrackedEntity,
    UnitOfWork,
    collection,
    get_collection_name,
    register_collection,
)
from mdb_crud.repositories import mongo
from mdb_crud.repositories.collections import unregister_collection


@collection("orders")
@dataclass(kw_only=True)
class Order(TrackedEntity):
    total: int = 0


@collection("invoices")
@dataclass(kw_only=True)
class Invoice(Entity):
    number: str = ""


@dataclass(kw_only=True)
class Draft(TrackedEntity):
    pass


class TestCollectionBinding:
    def test_declared_name_is_returned(self):
        assert get_collection_name(Order) == "orders"
        assert get_collection_name(Invoice) == "invoices"

    def test_undeclared_type_returns_none(self):
        assert get_collection_name(Draft) is None

    def test_binding_is_inherited(self):
        @dataclass(kw_only=True)
        class RushOrder(Order):
            pass

        assert get_collection_name(RushOrder) == "orders"

    def test_subclass_binding_overrides_base(self):
        @collection("archived_orders")
        @dataclass(kw_only=True)
        class ArchivedOrder(Order):
            pass

        assert get_collection_name(ArchivedOrder) == "archived_orders"
        assert get_collection_name(Order) == "orders"

    def test_rebinding_to_other_name_raises(self):
        with pytest.raises(ConfigurationError):
            register_collection(Order, "other_orders")

    def test_rebinding_same_name_is_allowed(self):
        register_collection(Order, "orders")
        assert get_collection_name(Order) == "orders"

    def test_empty_name_rejected(self):
        with pytest.raises(ConfigurationError):
            collection("")

    def test_unregister(self):
        @dataclass(kw_only=True)
        class Temp(Entity):
            pass

        register_collection(Temp, "temp")
        unregister_collection(Temp)
        assert get_collection_name(Temp) is None


class TestUnitOfWorkRepository:
    def test_same_type_returns_same_instance(self, unit_of_work):
        first = unit_of_work.repository(Order)
        second = unit_of_work.repository(Order)
        assert first is second
        assert isinstance(first, MongoRepository)

    def test_different_type_returns_different_instance(self, unit_of_work):
        assert unit_of_work.repository(Order) is not unit_of_work.repository(Invoice)

    def test_collection_resolved_once(self, unit_of_work, monkeypatch):
        calls = []
        real_lookup = mongo.get_collection_name

        def counting(entity_class):
            calls.append(entity_class)
            return real_lookup(entity_class)

        monkeypatch.setattr(mongo, "get_collection_name", counting)
        for _ in range(3):
            unit_of_work.repository(Order)
        assert calls == [Order]

    def test_repositories_share_the_store_handle(self, unit_of_work, db_factory):
        assert unit_of_work.repository(Order).context is db_factory.init()
        assert unit_of_work.repository(Invoice).context is unit_of_work.db_context

    def test_unbound_type_raises(self, unit_of_work):
        with pytest.raises(ConfigurationError):
            unit_of_work.repository(Draft)

    def test_separate_scopes_get_separate_repositories(self, db_factory):
        with UnitOfWork(db_factory) as a, UnitOfWork(db_factory) as b:
            assert a.repository(Order) is not b.repository(Order)
            assert a.db_context is b.db_context


class TestUnitOfWorkDispose:
    def test_dispose_releases_handle(self, db_factory):
        uow = UnitOfWork(db_factory)
        uow.repository(Order)

        uow.dispose()

        assert uow.disposed is True
        with pytest.raises(UnitOfWorkDisposedError):
            uow.repository(Order)
        with pytest.raises(UnitOfWorkDisposedError):
            _ = uow.db_context

    def test_dispose_keeps_shared_client_open(self, db_factory, fake_client):
        with UnitOfWork(db_factory):
            pass
        fake_client.close.assert_not_called()
        assert db_factory.init().closed is False

    @pytest.mark.asyncio
    async def test_async_context_manager_disposes(self, db_factory):
        async with UnitOfWork(db_factory) as uow:
            repo = uow.repository(Order)
            await repo.add_async(Order(total=3))
        assert uow.disposed is True
