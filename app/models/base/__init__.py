"""
Base models package.

Provides base classes, mixins and enums for all database models.
"""

from app.models.base.base_model import Base, BaseModel
from app.models.base.mixins import ActiveFlagMixin, TimestampMixin
from app.models.base.enums import (
    CustomDiscountType,
    FeeComponentType,
    FeeStructureSource,
    ScholarshipBasis,
    ScholarshipType,
    StudentStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    "ActiveFlagMixin",
    "TimestampMixin",
    "CustomDiscountType",
    "FeeComponentType",
    "FeeStructureSource",
    "ScholarshipBasis",
    "ScholarshipType",
    "StudentStatus",
]
