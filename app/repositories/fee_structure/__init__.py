"""
Fee Structure Repositories Package

This module exports all fee engine repositories.
"""

from app.repositories.fee_structure.batch_fee_structure_repository import (
    BatchFeeStructureRepository,
)
from app.repositories.fee_structure.fee_component_repository import (
    FeeComponentRepository,
)
from app.repositories.fee_structure.scholarship_repository import (
    ScholarshipRepository,
    StudentScholarshipRepository,
)
from app.repositories.fee_structure.student_fee_structure_repository import (
    StudentFeeStructureRepository,
)

__all__ = [
    "BatchFeeStructureRepository",
    "FeeComponentRepository",
    "ScholarshipRepository",
    "StudentScholarshipRepository",
    "StudentFeeStructureRepository",
]
