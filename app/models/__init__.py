# models/__init__.py
from app.models.base import Base, BaseModel
from app.models.academics import AcademicSession, Batch, Student
from app.models.fee_structure import (
    BatchFeeLineItem,
    BatchFeeStructure,
    FeeComponent,
    Scholarship,
    StudentFeeLineItem,
    StudentFeeStructure,
    StudentScholarship,
)

__all__ = [
    "Base",
    "BaseModel",
    "AcademicSession",
    "Batch",
    "Student",
    "BatchFeeLineItem",
    "BatchFeeStructure",
    "FeeComponent",
    "Scholarship",
    "StudentFeeLineItem",
    "StudentFeeStructure",
    "StudentScholarship",
]
