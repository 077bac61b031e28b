# --- File: app/schemas/fee_structure/__init__.py ---
"""
Fee structure and discount schemas package.

This module exports all fee engine schemas for easy importing across
the application.
"""

from __future__ import annotations

from app.schemas.fee_structure.batch_fee_structure import (
    ApplyTemplateResult,
    BatchFeeLineItemInput,
    BatchFeeStructureInput,
)
from app.schemas.fee_structure.fee_component import (
    FeeComponentCreate,
    FeeComponentFilter,
    FeeComponentResponse,
    FeeComponentUpdate,
)
from app.schemas.fee_structure.scholarship import (
    AssignScholarshipInput,
    ScholarshipCreate,
    ScholarshipFilter,
    ScholarshipResponse,
    ScholarshipUpdate,
    StudentScholarshipResponse,
)
from app.schemas.fee_structure.student_fee_structure import (
    CustomDiscountInput,
    CustomDiscountResponse,
    LineItemInput,
    LineItemResponse,
    StudentFeeStructureCreate,
    StudentFeeStructureDetail,
    StudentFeeStructureUpdate,
    StudentFeeSummary,
    StudentFeeSummaryItem,
)

__all__ = [
    # Templates
    "BatchFeeLineItemInput",
    "BatchFeeStructureInput",
    "ApplyTemplateResult",
    # Components
    "FeeComponentCreate",
    "FeeComponentUpdate",
    "FeeComponentFilter",
    "FeeComponentResponse",
    # Scholarships
    "ScholarshipCreate",
    "ScholarshipUpdate",
    "ScholarshipFilter",
    "ScholarshipResponse",
    "AssignScholarshipInput",
    "StudentScholarshipResponse",
    # Student structures
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
