"""
Base services module for the fee engine.

Provides the foundational service layer components:
- ServiceResult / ServiceError for typed outcomes
- BaseService with unit-of-work execution and error mapping
"""

from app.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)

from app.services.base.base_service import BaseService

__all__ = [
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",
    "BaseService",
]
