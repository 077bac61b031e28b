# --- File: app/schemas/common/pagination.py ---
"""
Pagination schemas for page-based list responses.
"""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import Field, computed_field

from app.config.settings import settings
from app.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
]


class PaginationParams(BaseSchema):
    """Pagination query parameters."""

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
    )
    page_size: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )

    @computed_field  # type: ignore[misc]
    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.page_size

    @computed_field  # type: ignore[misc]
    @property
    def limit(self) -> int:
        """Get limit for database queries."""
        return self.page_size


class PaginationMeta(BaseSchema):
    """Pagination metadata."""

    total_items: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    current_page: int = Field(..., ge=1, description="Current page number")
    page_size: int = Field(..., ge=1, description="Items per page")
    has_next: bool = Field(..., description="Has next page")
    has_previous: bool = Field(..., description="Has previous page")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response."""

    items: List[T] = Field(..., description="List of items")
    meta: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def create(
        cls,
        items: List[T],
        total_items: int,
        page: int,
        page_size: int,
    ) -> "PaginatedResponse[T]":
        """
        Create paginated response with calculated metadata.

        Args:
            items: List of items for current page.
            total_items: Total number of items across all pages.
            page: Current page number.
            page_size: Number of items per page.
        """
        total_pages = (
            (total_items + page_size - 1) // page_size if page_size > 0 else 0
        )

        meta = PaginationMeta(
            total_items=total_items,
            total_pages=total_pages,
            current_page=page,
            page_size=page_size,
            has_next=page < total_pages,
            has_previous=page > 1,
        )

        return cls(items=items, meta=meta)
