"""
Unit tests for custom exceptions.

Tests exception hierarchy and error messages.
"""

from mdb_crud.exceptions import (
    ConfigurationError,
    InitializationError,
    MdbCrudError,
    NotFoundError,
    ServiceError,
    UnitOfWorkDisposedError,
)


class TestExceptionHierarchy:
    """Test exception inheritance hierarchy."""

    def test_base_error_is_runtime_error(self):
        assert isinstance(MdbCrudError("test error"), RuntimeError)

    def test_subclasses_inherit_base(self):
        for error in (
            InitializationError("init failed"),
            ConfigurationError("config invalid"),
            NotFoundError(),
            ServiceError("bad input"),
            UnitOfWorkDisposedError("gone"),
        ):
            assert isinstance(error, MdbCrudError)
            assert isinstance(error, RuntimeError)


class TestExceptionMessages:
    """Test exception message formatting."""

    def test_base_error_message(self):
        error = MdbCrudError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.context == {}

    def test_base_error_with_context(self):
        error = MdbCrudError("Something went wrong", context={"collection": "users"})
        assert "context:" in str(error)
        assert "collection=users" in str(error)

    def test_initialization_error_with_context(self):
        error = InitializationError(
            "Connection failed", mongo_uri="mongodb://localhost:27017", db_name="test_db"
        )
        assert error.mongo_uri == "mongodb://localhost:27017"
        assert error.db_name == "test_db"
        assert error.context["db_name"] == "test_db"

    def test_configuration_error_with_key_and_value(self):
        error = ConfigurationError("Bad pool", config_key="max_pool_size", config_value=0)
        assert error.context == {"config_key": "max_pool_size", "config_value": 0}

    def test_not_found_defaults(self):
        error = NotFoundError(entity="User", entity_id="42")
        assert error.message == "Entity not found"
        assert error.entity == "User"
        assert error.entity_id == "42"
        assert "entity_id=42" in str(error)

    def test_service_error_status_code(self):
        assert ServiceError("nope").status_code == 400
        assert ServiceError("Invalid token", status_code=401).status_code == 401
