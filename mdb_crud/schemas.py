"""
Response envelopes shared by the service layer and the HTTP boundary.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from .constants import DEFAULT_SUCCESS_MESSAGE

T = TypeVar("T")


class ResultResponse(BaseModel, Generic[T]):
    """Single result envelope."""

    data: T | None = Field(default=None, description="Result payload")
    message: str = Field(default=DEFAULT_SUCCESS_MESSAGE, description="Human readable message")


class PagingResponse(BaseModel, Generic[T]):
    """Page of results plus the total number of matching records."""

    data: list[T] = Field(default_factory=list, description="Page items")
    total_counts: int = Field(default=0, ge=0, description="Total number of records")


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""

    message: str
    context: dict[str, Any] | None = None
    correlation_id: str | None = None
