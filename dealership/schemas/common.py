"""Response envelope shared by every endpoint."""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Standard envelope: {success, message, data, errors, timestamp}."""

    success: bool = True
    message: str = "Success"
    data: Optional[T] = None
    errors: Optional[Any] = None
    timestamp: datetime = Field(default_factory=utc_now)


class Pagination(CamelModel):
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "Pagination":
        total_pages = (total_items + limit - 1) // limit if total_items else 0
        return cls(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class PaginatedResponse(ApiResponse[T], Generic[T]):
    """Envelope for list endpoints."""

    pagination: Pagination
