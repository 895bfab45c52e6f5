"""
CRUD router factory.

Builds the standard five routes for a BaseService subclass:

    POST   /            add
    PUT    /{id}        update
    DELETE /{id}        delete
    GET    /{id}        get
    GET    /            paged result (filter from query parameters)
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..repositories.unit_of_work import UnitOfWork
from ..schemas import PagingResponse, ResultResponse
from ..services.base import BaseService
from ..services.mapping import Mapper
from .dependencies import get_unit_of_work
from .principal import Principal, get_optional_principal

logger = logging.getLogger(__name__)


class EmptyFilter(BaseModel):
    """Filter used when a resource declares none."""


def build_crud_router(
    service_class: type[BaseService],
    add_model: type[BaseModel],
    update_model: type[BaseModel],
    view_model: type[BaseModel],
    filter_model: type[BaseModel] | None = None,
    mapper: Mapper | None = None,
    prefix: str = "",
    tags: list[str] | None = None,
    dependencies: list[Any] | None = None,
) -> APIRouter:
    """
    Build an APIRouter exposing a service.

    Args:
        service_class: BaseService subclass, constructed per request
        add_model: Request body for POST
        update_model: Request body for PUT
        view_model: Response item model
        filter_model: Query model for the paged GET
        mapper: Mapper shared by every service instance
        prefix: Router prefix, e.g. "/users"
        tags: OpenAPI tags
        dependencies: Extra router-wide dependencies (e.g. an auth guard)

    Returns:
        Configured APIRouter
    """
    mapper = mapper or Mapper()
    filter_model = filter_model or EmptyFilter
    router = APIRouter(prefix=prefix, tags=tags or [], dependencies=dependencies or [])

    def get_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> BaseService:
        return service_class(mapper, uow)

    @router.post("", response_model=ResultResponse[Any])
    async def add(
        model: add_model,  # type: ignore[valid-type]
        service: BaseService = Depends(get_service),
    ) -> ResultResponse[Any]:
        return ResultResponse(data=await service.add(model))

    @router.put("/{id}", response_model=ResultResponse[str])
    async def update(
        id: str,
        model: update_model,  # type: ignore[valid-type]
        service: BaseService = Depends(get_service),
    ) -> ResultResponse[str]:
        return ResultResponse(data=await service.update(model, id))

    @router.delete("/{id}", response_model=ResultResponse[str])
    async def delete(
        id: str,
        service: BaseService = Depends(get_service),
    ) -> ResultResponse[str]:
        return ResultResponse(data=await service.delete(id))

    @router.get("/{id}", response_model=ResultResponse[view_model])
    async def get(
        id: str,
        service: BaseService = Depends(get_service),
    ) -> ResultResponse:
        return ResultResponse(data=await service.get(id))

    @router.get("", response_model=PagingResponse[view_model])
    async def get_paged(
        filter: filter_model = Depends(),  # type: ignore[valid-type]
        principal: Principal | None = Depends(get_optional_principal),
        service: BaseService = Depends(get_service),
    ) -> PagingResponse:
        user_id = principal.user_id if principal else None
        return await service.get_paged_result(filter, user_id)

    logger.debug(f"Built CRUD router for {service_class.__name__} at '{prefix}'")
    return router
