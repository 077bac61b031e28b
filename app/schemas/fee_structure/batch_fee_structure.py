# --- File: app/schemas/fee_structure/batch_fee_structure.py ---
"""
Batch fee template schemas.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.common.base import BaseCreateSchema, BaseSchema

__all__ = [
    "BatchFeeLineItemInput",
    "BatchFeeStructureInput",
    "ApplyTemplateResult",
]


class BatchFeeLineItemInput(BaseSchema):
    fee_component_id: UUID
    amount: int = Field(..., gt=0, description="Amount in minor units")


class BatchFeeStructureInput(BaseCreateSchema):
    """
    Create or replace the fee template of a batch for a session.

    An existing template for the same (batch, session) is updated in place.
    """

    batch_id: UUID
    session_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    line_items: List[BatchFeeLineItemInput] = Field(..., min_length=1)

    @field_validator("line_items")
    @classmethod
    def validate_line_items(cls, v: List[BatchFeeLineItemInput]) -> List[BatchFeeLineItemInput]:
        component_ids = [item.fee_component_id for item in v]
        if len(set(component_ids)) != len(component_ids):
            raise ValueError("Each fee component may appear only once in a template")
        return v


class ApplyTemplateResult(BaseSchema):
    applied: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    message: str
