# --- File: app/schemas/fee_structure/student_fee_structure.py ---
"""
Student fee structure schemas.

Inbound line items, structure create/update, custom discount input, and
the read models handed to installment generation and dashboards. All
amounts are integers in minor currency units.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.models.base import CustomDiscountType, FeeComponentType, FeeStructureSource
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "LineItemInput",
    "StudentFeeStructureCreate",
    "StudentFeeStructureUpdate",
    "CustomDiscountInput",
    "LineItemResponse",
    "CustomDiscountResponse",
    "StudentFeeStructureDetail",
    "StudentFeeSummaryItem",
    "StudentFeeSummary",
]


class LineItemInput(BaseSchema):
    """
    One fee component charge.

    ``original_amount`` defaults to ``adjusted_amount`` when omitted.
    A waived line item carries an adjusted amount of zero.
    """

    fee_component_id: UUID
    original_amount: Optional[int] = Field(default=None, ge=0)
    adjusted_amount: int = Field(..., ge=0)
    waived: bool = False
    waiver_reason: Optional[str] = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def validate_amounts(self) -> "LineItemInput":
        if self.waived and self.adjusted_amount != 0:
            raise ValueError("A waived line item must have adjusted_amount 0")
        if self.waiver_reason and not self.waived:
            raise ValueError("waiver_reason is only allowed on waived line items")
        return self


def _reject_repeated_components(items: Optional[List[LineItemInput]]) -> Optional[List[LineItemInput]]:
    if items is None:
        return items
    seen = set()
    for item in items:
        if item.fee_component_id in seen:
            raise ValueError(f"Fee component {item.fee_component_id} appears more than once")
        seen.add(item.fee_component_id)
    return items


class StudentFeeStructureCreate(BaseCreateSchema):
    student_id: UUID
    session_id: UUID
    line_items: List[LineItemInput] = Field(..., min_length=1)
    remarks: Optional[str] = Field(default=None, max_length=500)

    @field_validator("line_items")
    @classmethod
    def validate_line_items(cls, v: List[LineItemInput]) -> List[LineItemInput]:
        return _reject_repeated_components(v)


class StudentFeeStructureUpdate(BaseUpdateSchema):
    """
    Replace line items and/or remarks.

    Supplying ``line_items`` marks the structure as custom.
    """

    line_items: Optional[List[LineItemInput]] = Field(default=None, min_length=1)
    remarks: Optional[str] = Field(default=None, max_length=500)

    @field_validator("line_items")
    @classmethod
    def validate_line_items(cls, v: Optional[List[LineItemInput]]) -> Optional[List[LineItemInput]]:
        return _reject_repeated_components(v)


class CustomDiscountInput(BaseSchema):
    type: CustomDiscountType
    value: int = Field(..., gt=0, description="Percentage (1-100) or amount in minor units")
    remarks: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def validate_percentage(self) -> "CustomDiscountInput":
        if self.type == CustomDiscountType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage discount value must be between 0 and 100")
        return self


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------


class LineItemResponse(BaseSchema):
    id: UUID
    fee_component_id: UUID
    component_name: str
    component_type: FeeComponentType
    original_amount: int
    adjusted_amount: int
    waived: bool
    waiver_reason: Optional[str] = None

    @classmethod
    def from_model(cls, item) -> "LineItemResponse":
        return cls(
            id=item.id,
            fee_component_id=item.fee_component_id,
            component_name=item.fee_component.name,
            component_type=item.fee_component.type,
            original_amount=item.original_amount,
            adjusted_amount=item.adjusted_amount,
            waived=item.waived,
            waiver_reason=item.waiver_reason,
        )


class CustomDiscountResponse(BaseSchema):
    type: CustomDiscountType
    value: int
    amount: int
    remarks: Optional[str] = None

    @classmethod
    def from_structure(cls, structure) -> Optional["CustomDiscountResponse"]:
        if not structure.has_custom_discount:
            return None
        return cls(
            type=structure.custom_discount_type,
            value=structure.custom_discount_value,
            amount=structure.custom_discount_amount,
            remarks=structure.custom_discount_remarks,
        )


class StudentFeeStructureDetail(BaseResponseSchema):
    """Structure with line items resolved against their fee components."""

    student_id: UUID
    student_name: str
    session_id: UUID
    session_name: str
    source: FeeStructureSource
    batch_fee_structure_id: Optional[UUID] = None
    gross_amount: int
    scholarship_amount: int
    custom_discount: Optional[CustomDiscountResponse] = None
    net_amount: int
    remarks: Optional[str] = None
    line_items: List[LineItemResponse]

    @classmethod
    def from_model(cls, structure) -> "StudentFeeStructureDetail":
        return cls(
            id=structure.id,
            created_at=structure.created_at,
            updated_at=structure.updated_at,
            student_id=structure.student_id,
            student_name=structure.student.full_name,
            session_id=structure.session_id,
            session_name=structure.session.name,
            source=structure.source,
            batch_fee_structure_id=structure.batch_fee_structure_id,
            gross_amount=structure.gross_amount,
            scholarship_amount=structure.scholarship_amount,
            custom_discount=CustomDiscountResponse.from_structure(structure),
            net_amount=structure.net_amount,
            remarks=structure.remarks,
            line_items=[LineItemResponse.from_model(item) for item in structure.line_items],
        )


class StudentFeeSummaryItem(BaseSchema):
    structure_id: UUID
    session_id: UUID
    session_name: str
    is_current_session: bool
    gross_amount: int
    scholarship_amount: int
    custom_discount: Optional[CustomDiscountResponse] = None
    net_amount: int
    line_item_count: int


class StudentFeeSummary(BaseSchema):
    """Per-session fee figures for a student's dashboard."""

    student_id: UUID
    student_name: str
    fee_structures: List[StudentFeeSummaryItem]
