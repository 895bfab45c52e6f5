"""
Correlation ID middleware.

Binds a correlation ID and the request context (method, path, caller id) to
every request so that repository and service log records emitted while
handling it carry the same fields.

This module is part of MDB_CRUD.
"""

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..constants import CLAIM_USER_ID
from ..observability import (
    clear_correlation_id,
    clear_request_context,
    set_correlation_id,
    set_request_context,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _caller_id(request: Request) -> str | None:
    """User id claim left by upstream authentication, if any."""
    claims = getattr(request.state, "user", None)
    if not isinstance(claims, dict):
        return None
    return claims.get(CLAIM_USER_ID)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Reuse the caller's X-Correlation-ID header or generate one, expose it on
    request.state and echo it on the response.

    Register it before the authentication middleware; Starlette runs the
    last registered middleware first, so the caller id is then already on
    request.state when the request context is bound.
    """

    def __init__(self, app, header_name: str = CORRELATION_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(self.header_name))
        request.state.correlation_id = correlation_id
        set_request_context(
            method=request.method,
            path=request.url.path,
            user_id=_caller_id(request),
        )
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
            clear_request_context()
        response.headers[self.header_name] = correlation_id
        return response
