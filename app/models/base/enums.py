"""
Database enums mirroring schema enums.

Provides SQLAlchemy-compatible enum definitions that match
the Pydantic schema enums for consistency.
"""

import enum


class FeeComponentType(str, enum.Enum):
    """Category tag of a chargeable fee component."""
    TUITION = "tuition"
    ADMISSION = "admission"
    TRANSPORT = "transport"
    LAB = "lab"
    LIBRARY = "library"
    SPORTS = "sports"
    EXAM = "exam"
    UNIFORM = "uniform"
    MISC = "misc"


class ScholarshipType(str, enum.Enum):
    """Discount mechanics of a scholarship."""
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    COMPONENT_WAIVER = "component_waiver"


class ScholarshipBasis(str, enum.Enum):
    """Why a scholarship is granted (informational only)."""
    MERIT = "merit"
    NEED_BASED = "need_based"
    SPORTS = "sports"
    SIBLING = "sibling"
    STAFF_WARD = "staff_ward"
    GOVERNMENT = "government"
    CUSTOM = "custom"


class CustomDiscountType(str, enum.Enum):
    """Mechanics available to a student-specific custom discount."""
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class FeeStructureSource(str, enum.Enum):
    """Origin of a student fee structure."""
    TEMPLATE = "template"
    CUSTOM = "custom"


class StudentStatus(str, enum.Enum):
    """Enrollment status of a student."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    WITHDRAWN = "withdrawn"
