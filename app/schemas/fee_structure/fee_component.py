# --- File: app/schemas/fee_structure/fee_component.py ---
"""
Fee component schemas.

Inbound shapes for the organization's fee component catalog and the
response shape used by listings and dropdowns.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.base import FeeComponentType
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseFilterSchema,
    BaseResponseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "FeeComponentCreate",
    "FeeComponentUpdate",
    "FeeComponentFilter",
    "FeeComponentResponse",
]


class FeeComponentCreate(BaseCreateSchema):
    """Create a chargeable fee component."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    type: FeeComponentType = Field(..., description="Category tag")
    description: Optional[str] = Field(default=None, max_length=500)


class FeeComponentUpdate(BaseUpdateSchema):
    """Partial update; the component type is immutable."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class FeeComponentFilter(BaseFilterSchema):
    """
    Listing filters.

    ``is_active`` defaults to active components only; pass ``None`` to list
    active and inactive together.
    """

    is_active: Optional[bool] = True
    type: Optional[FeeComponentType] = None


class FeeComponentResponse(BaseResponseSchema):
    org_id: UUID
    name: str
    type: FeeComponentType
    description: Optional[str] = None
    is_active: bool
