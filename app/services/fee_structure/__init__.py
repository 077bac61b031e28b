"""
Fee Structure Service Layer

Business logic for the fee engine:
- Fee component and scholarship catalogs
- Batch fee templates and their application to students
- Student fee structures with custom discounts
- Scholarship assignments
- Discount calculation and recalculation of derived totals
"""

from app.services.fee_structure.batch_fee_structure_service import BatchFeeStructureService
from app.services.fee_structure.fee_component_service import FeeComponentService
from app.services.fee_structure.recalculation_service import (
    RecalculationService,
    assert_structure_consistent,
)
from app.services.fee_structure.scholarship_assignment_service import ScholarshipAssignmentService
from app.services.fee_structure.scholarship_service import ScholarshipService
from app.services.fee_structure.student_fee_structure_service import StudentFeeStructureService
from app.services.fee_structure.discount_calculator import (
    compute_custom_discount,
    compute_discount,
    compute_scholarship_discount,
    placeholder_scholarship_discount,
    validate_discount_config,
)

__all__ = [
    "BatchFeeStructureService",
    "FeeComponentService",
    "RecalculationService",
    "ScholarshipAssignmentService",
    "ScholarshipService",
    "StudentFeeStructureService",
    "assert_structure_consistent",
    "compute_discount",
    "compute_custom_discount",
    "compute_scholarship_discount",
    "placeholder_scholarship_discount",
    "validate_discount_config",
]
