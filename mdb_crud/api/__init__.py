"""
HTTP boundary for MDB_CRUD services (FastAPI).

Usage:
    app = FastAPI()
    app.state.db_factory = DbFactory(CrudConfig().to_setting())
    register_exception_handlers(app)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(
        build_crud_router(UserService, UserAdd, UserUpdate, UserView, prefix="/users")
    )
"""

from .dependencies import get_db_factory, get_unit_of_work
from .errors import register_exception_handlers
from .middleware import CorrelationIdMiddleware
from .principal import Principal, get_optional_principal, get_principal, principal_from_claims
from .router import build_crud_router

__all__ = [
    "get_db_factory",
    "get_unit_of_work",
    "register_exception_handlers",
    "CorrelationIdMiddleware",
    "Principal",
    "get_principal",
    "get_optional_principal",
    "principal_from_claims",
    "build_crud_router",
]
