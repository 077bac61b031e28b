"""
Fee structure models.

Fee components, scholarships, batch fee templates, student fee
structures with their line items, and scholarship assignments.
"""

from app.models.fee_structure.fee_component import FeeComponent
from app.models.fee_structure.scholarship import Scholarship
from app.models.fee_structure.batch_fee_structure import BatchFeeLineItem, BatchFeeStructure
from app.models.fee_structure.student_fee_structure import StudentFeeLineItem, StudentFeeStructure
from app.models.fee_structure.student_scholarship import StudentScholarship

__all__ = [
    "FeeComponent",
    "Scholarship",
    "BatchFeeStructure",
    "BatchFeeLineItem",
    "StudentFeeStructure",
    "StudentFeeLineItem",
    "StudentScholarship",
]
