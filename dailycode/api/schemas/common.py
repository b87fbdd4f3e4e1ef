"""Response schemas shared across routers."""

from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int = Field(..., description="Matching items across all pages")
    page: int = Field(..., ge=1, description="1-based page number")
    page_size: int = Field(..., description="Items per page")
    has_more: bool = Field(..., description="Whether a later page has items")

    @classmethod
    def from_page(cls, page: Any, convert: Callable[[Any], T]) -> "PaginatedResponse[T]":
        """Build from a service page, converting each item for the response."""
        return cls(
            items=[convert(item) for item in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            has_more=page.has_more,
        )
