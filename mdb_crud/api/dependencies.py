"""
FastAPI dependencies for MDB_CRUD.

Usage:
    from fastapi import Depends
    from mdb_crud.api import get_unit_of_work

    @app.get("/users/{user_id}")
    async def get_user(user_id: str, uow: UnitOfWork = Depends(get_unit_of_work)):
        return await uow.repository(User).get_by_id_async(user_id)
"""

from collections.abc import AsyncIterator

from fastapi import HTTPException, Request

from ..database.factory import DbFactory
from ..repositories.unit_of_work import UnitOfWork


async def get_db_factory(request: Request) -> DbFactory:
    """Get the process-wide DbFactory from app state."""
    factory = getattr(request.app.state, "db_factory", None)
    if factory is None:
        raise HTTPException(503, "Database not initialized")
    return factory


async def get_unit_of_work(request: Request) -> AsyncIterator[UnitOfWork]:
    """Get a request-scoped UnitOfWork, disposed when the request ends."""
    factory = await get_db_factory(request)
    uow = UnitOfWork(factory)
    try:
        yield uow
    finally:
        uow.dispose()
