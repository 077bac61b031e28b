# --- File: app/schemas/fee_structure/scholarship.py ---
"""
Scholarship schemas with discount configuration validation.

Covers the scholarship catalog (definitions) and scholarship assignments
(grants of a definition to a student for one session).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from app.models.base import ScholarshipBasis, ScholarshipType
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseFilterSchema,
    BaseResponseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "ScholarshipCreate",
    "ScholarshipUpdate",
    "ScholarshipFilter",
    "ScholarshipResponse",
    "AssignScholarshipInput",
    "StudentScholarshipResponse",
]


class ScholarshipCreate(BaseCreateSchema):
    """
    Create a scholarship definition.

    ``value`` is a whole percentage for percentage scholarships and an
    amount in minor units for fixed_amount. For component_waiver it is
    stored but not used by the calculation.
    """

    name: str = Field(..., min_length=1, max_length=255)
    type: ScholarshipType = Field(..., description="Discount mechanics")
    basis: ScholarshipBasis = Field(..., description="Reason for the grant (informational)")
    value: int = Field(..., gt=0, description="Percentage (1-100) or amount in minor units")
    component_id: Optional[UUID] = Field(
        default=None,
        description="Waived fee component (component_waiver only)",
    )
    max_amount: Optional[int] = Field(
        default=None,
        gt=0,
        description="Cap in minor units (percentage only)",
    )
    description: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def validate_configuration(self) -> "ScholarshipCreate":
        if self.type == ScholarshipType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage scholarship value must be between 0 and 100")
        if self.type == ScholarshipType.COMPONENT_WAIVER and self.component_id is None:
            raise ValueError("component_id is required for component_waiver scholarships")
        if self.type != ScholarshipType.COMPONENT_WAIVER and self.component_id is not None:
            raise ValueError("component_id is only allowed for component_waiver scholarships")
        if self.max_amount is not None and self.type != ScholarshipType.PERCENTAGE:
            raise ValueError("max_amount only applies to percentage scholarships")
        return self


class ScholarshipUpdate(BaseUpdateSchema):
    """
    Partial update. ``type``, ``basis`` and ``component_id`` are fixed at
    creation; an explicit ``max_amount=None`` removes the cap.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    value: Optional[int] = Field(default=None, gt=0)
    max_amount: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class ScholarshipFilter(BaseFilterSchema):
    is_active: Optional[bool] = True
    type: Optional[ScholarshipType] = None
    basis: Optional[ScholarshipBasis] = None


class ScholarshipResponse(BaseResponseSchema):
    org_id: UUID
    name: str
    type: ScholarshipType
    basis: ScholarshipBasis
    value: int
    component_id: Optional[UUID] = None
    max_amount: Optional[int] = None
    description: Optional[str] = None
    is_active: bool


class AssignScholarshipInput(BaseCreateSchema):
    """Grant a scholarship to a student for one academic session."""

    student_id: UUID
    scholarship_id: UUID
    session_id: UUID
    remarks: Optional[str] = Field(default=None, max_length=500)


class StudentScholarshipResponse(BaseResponseSchema):
    student_id: UUID
    scholarship_id: UUID
    session_id: UUID
    discount_amount: int
    approved_by_id: UUID
    approved_at: datetime
    remarks: Optional[str] = None
    is_active: bool
    scholarship: ScholarshipResponse
