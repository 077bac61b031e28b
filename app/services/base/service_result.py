"""
Service result patterns for standardized response handling.
"""

from typing import TypeVar, Generic, Optional, Any, Dict
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from datetime import datetime, timezone

from app.core.exceptions import (
    BaseAppException,
    ConsistencyError,
    DuplicateError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)


class ErrorCode(str, Enum):
    """Standard error codes for service operations."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Business logic errors
    CONSISTENCY_ERROR = "CONSISTENCY_ERROR"

    # Data errors
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    """Represents a service operation error with context."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    timestamp: Optional[datetime] = None
    exception: Optional[BaseAppException] = dataclass_field(default=None, repr=False)

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "field": self.field,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


# Domain exception -> (service error code, severity)
_EXCEPTION_CODES = (
    (NotFoundError, ErrorCode.NOT_FOUND, ErrorSeverity.WARNING),
    (ValidationError, ErrorCode.VALIDATION_ERROR, ErrorSeverity.WARNING),
    (DuplicateError, ErrorCode.ALREADY_EXISTS, ErrorSeverity.WARNING),
    (ConsistencyError, ErrorCode.CONSISTENCY_ERROR, ErrorSeverity.CRITICAL),
    (RepositoryError, ErrorCode.DATABASE_ERROR, ErrorSeverity.CRITICAL),
)


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Standardized service operation result with success/failure pattern.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: Error information (if failed)
        message: Human-readable status message
        metadata: Additional context information
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a successful result."""
        return cls(
            is_success=True,
            data=data,
            message=message,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        error: ServiceError,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a failed result."""
        return cls(
            is_success=False,
            error=error,
            message=error.message,
            metadata=metadata or {},
        )

    @classmethod
    def from_app_exception(cls, exception: BaseAppException) -> "ServiceResult[TData]":
        """Create a failed result carrying a domain exception."""
        code, severity = ErrorCode.INTERNAL_ERROR, ErrorSeverity.ERROR
        for exc_type, mapped_code, mapped_severity in _EXCEPTION_CODES:
            if isinstance(exception, exc_type):
                code, severity = mapped_code, mapped_severity
                break

        return cls.failure(
            ServiceError(
                code=code,
                message=exception.message,
                severity=severity,
                details=exception.details or None,
                exception=exception,
            )
        )

    @classmethod
    def from_exception(
        cls,
        exception: Exception,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> "ServiceResult[TData]":
        """Create a failed result from an unexpected exception."""
        return cls.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}: {str(exception)}",
                severity=severity,
                details={"exception_type": type(exception).__name__},
            )
        )

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def unwrap(self) -> TData:
        """
        Unwrap the result data or raise if failed.

        Raises:
            BaseAppException: the domain exception behind the failure
            ValueError: if the failure did not come from a domain exception
        """
        if not self.is_success:
            if self.error is not None and self.error.exception is not None:
                raise self.error.exception
            raise ValueError(f"Cannot unwrap failed result: {self.error.message if self.error else 'Unknown error'}")
        return self.data

    def unwrap_or(self, default: TData) -> TData:
        """Unwrap the result data or return default if failed."""
        return self.data if self.is_success else default

    def unwrap_or_none(self) -> Optional[TData]:
        """Unwrap the result data or return None if failed."""
        return self.data if self.is_success else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result = {
            "is_success": self.is_success,
            "message": self.message,
            "metadata": self.metadata,
        }

        if self.is_success:
            result["data"] = self.data
        else:
            result["error"] = self.error.to_dict() if self.error else None

        return result

    def __bool__(self) -> bool:
        """Allow boolean evaluation of the result."""
        return self.is_success

    def __repr__(self) -> str:
        status = "Success" if self.is_success else "Failure"
        if self.message:
            return f"ServiceResult({status}: {self.message})"
        return f"ServiceResult({status})"


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
