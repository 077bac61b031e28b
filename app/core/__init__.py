"""Core application modules."""

from .exceptions import (
    BaseAppException,
    ConsistencyError,
    DuplicateAssignmentError,
    DuplicateError,
    DuplicateStructureError,
    NotFoundError,
    ValidationError,
)
from .logging import get_logger, setup_logging

__all__ = [
    "BaseAppException",
    "ConsistencyError",
    "DuplicateAssignmentError",
    "DuplicateError",
    "DuplicateStructureError",
    "NotFoundError",
    "ValidationError",
    "get_logger",
    "setup_logging",
]
