"""
Custom exceptions for MDB_CRUD.

All errors raised by the package derive from MdbCrudError, which stays a
RuntimeError so callers catching RuntimeError keep working. Store-level
failures (pymongo.errors.*) are never wrapped and propagate unchanged.
"""

from typing import Any, Dict, Optional


class MdbCrudError(RuntimeError):
    """
    Base exception for MDB_CRUD errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (entity,
                 collection_name, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InitializationError(MdbCrudError):
    """
    Raised when the document store handle cannot be created.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class ConfigurationError(MdbCrudError):
    """
    Raised when configuration is invalid or missing.

    Covers both connection settings and entity types that were never bound
    to a collection name.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class NotFoundError(MdbCrudError):
    """
    Raised by the service layer when an identifier does not resolve to a
    stored entity.

    Attributes:
        entity: Name of the entity type that was looked up
        entity_id: Identifier that was not found
    """

    def __init__(
        self,
        message: str = "Entity not found",
        entity: Optional[str] = None,
        entity_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if entity:
            context["entity"] = entity
        if entity_id is not None:
            context["entity_id"] = entity_id
        super().__init__(message, context=context)
        self.entity = entity
        self.entity_id = entity_id


class ServiceError(MdbCrudError):
    """
    Raised for caller-facing failures (validation, bad credentials) that the
    HTTP boundary turns into a 4xx response.

    Attributes:
        status_code: HTTP status code to respond with
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, context=context)
        self.status_code = status_code


class UnitOfWorkDisposedError(MdbCrudError):
    """Raised when a repository is requested from a disposed UnitOfWork."""
