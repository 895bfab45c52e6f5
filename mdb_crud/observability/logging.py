"""
Request-scoped structured logging for MDB_CRUD.

CorrelationIdMiddleware binds a correlation id and the request context
(method, path, user id) into context variables when a request arrives.
Loggers returned by get_logger, and log_operation, copy both onto every
record, so the repository and service records of one request can be joined.
"""

import contextvars
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mdb_crud_correlation_id", default=None
)

_request_context: contextvars.ContextVar[dict[str, str] | None] = contextvars.ContextVar(
    "mdb_crud_request_context", default=None
)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind correlation_id (or a fresh uuid4) to the current context and return it."""
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def set_request_context(
    method: str | None = None,
    path: str | None = None,
    user_id: Any = None,
    **extra: Any,
) -> None:
    """
    Bind the current request's details for logging.

    None values are dropped; everything else is stored as a string so the
    record fields stay flat.
    """
    values = {"method": method, "path": path, "user_id": user_id, **extra}
    _request_context.set({k: str(v) for k, v in values.items() if v is not None})


def clear_request_context() -> None:
    _request_context.set(None)


def get_logging_context() -> dict[str, Any]:
    """Fields every contextual record carries: timestamp, correlation id, request."""
    context: dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat()}

    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id

    context.update(_request_context.get() or {})
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Adds the request logging context to each record; per-call extra wins."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    success: bool = True,
    level: int | None = None,
    duration_ms: float | None = None,
    **fields: Any,
) -> None:
    """
    Emit one record describing a repository or service operation.

    Args:
        logger: Plain logger or contextual adapter
        operation: Name such as "Customer.update"
        success: Outcome; failures default to WARNING, successes to INFO
        level: Explicit log level, overriding the outcome default
        duration_ms: Elapsed time, rounded to two decimals on the record
        **fields: Extra record fields (entity_id, reason, ...)
    """
    if level is None:
        level = logging.INFO if success else logging.WARNING

    record_fields = get_logging_context()
    record_fields.update(fields)
    record_fields["operation"] = operation
    record_fields["success"] = success

    message = f"{operation} {'succeeded' if success else 'failed'}"
    if duration_ms is not None:
        record_fields["duration_ms"] = round(duration_ms, 2)
        message += f" in {duration_ms:.2f}ms"

    logger.log(level, message, extra=record_fields)
