"""
Exception handlers translating MDB_CRUD errors into HTTP responses.

NotFoundError -> 404, ServiceError -> its status code, ConfigurationError
and UnitOfWorkDisposedError -> 500. Store errors are not handled here.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import (
    ConfigurationError,
    NotFoundError,
    ServiceError,
    UnitOfWorkDisposedError,
)
from ..observability import get_correlation_id
from ..schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, context: dict | None = None) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        context=context or None,
        correlation_id=get_correlation_id(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> 404: {exc}")
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message, exc.context)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return _error_response(exc.status_code, exc.message, exc.context)


async def configuration_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} -> 500: {exc}", exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server misconfigured")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the MDB_CRUD exception handlers on an application."""
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(UnitOfWorkDisposedError, configuration_error_handler)
