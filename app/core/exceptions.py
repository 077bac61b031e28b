"""
Custom Exceptions for the School Fee Engine

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Fee engine invariants
    CONSISTENCY_VIOLATION = "CONSISTENCY_VIOLATION"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        self.field_errors = field_errors or {}
        super().__init__(message, error_code, details, status_code)


class NotFoundError(BaseAppException):
    """
    Raised when a referenced record does not exist or lives in another tenant.

    Both cases produce the same message so foreign records never leak.
    """

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None,
        }
        self.resource_type = resource_type
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class DuplicateError(BaseAppException):
    """Raised when a uniqueness rule of the fee engine would be violated"""

    def __init__(
        self,
        message: str = "Record already exists",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, details, 409)


class DuplicateStructureError(DuplicateError):
    """A fee structure already exists for the student and session"""

    def __init__(self, student_id: Any, session_id: Any):
        super().__init__(
            "Fee structure already exists for this student and session. Use update instead.",
            {"student_id": str(student_id), "session_id": str(session_id)},
        )


class DuplicateAssignmentError(DuplicateError):
    """The scholarship is already assigned to the student for the session"""

    def __init__(self, student_id: Any, scholarship_id: Any, session_id: Any):
        super().__init__(
            "This scholarship is already assigned to the student for this session",
            {
                "student_id": str(student_id),
                "scholarship_id": str(scholarship_id),
                "session_id": str(session_id),
            },
        )


class DuplicateComponentError(DuplicateError):
    """A fee component with the same name and type exists in the organization"""

    def __init__(self, name: str, component_type: str):
        super().__init__(
            f'A fee component with name "{name}" and type "{component_type}" already exists',
            {"name": name, "type": component_type},
        )


class DuplicateScholarshipError(DuplicateError):
    """A scholarship with the same name exists in the organization"""

    def __init__(self, name: str):
        super().__init__(
            f'A scholarship with name "{name}" already exists',
            {"name": name},
        )


class ConsistencyError(BaseAppException):
    """
    Raised when a derived fee snapshot breaks its invariants.

    Never expected in normal operation; the enclosing unit of work is
    rolled back instead of persisting the snapshot.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONSISTENCY_VIOLATION, details, 500)


class RepositoryError(BaseAppException):
    """Exception raised for unexpected persistence failures"""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "NotFoundError",
    "DuplicateError",
    "DuplicateStructureError",
    "DuplicateAssignmentError",
    "DuplicateComponentError",
    "DuplicateScholarshipError",
    "ConsistencyError",
    "RepositoryError",
]
