"""
Base service class providing common functionality for all services.
"""

from typing import TypeVar, Generic, Optional, Dict, Any, Callable, List, Mapping, Type, Union

from pydantic import BaseModel as PydanticModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import BaseAppException, DuplicateError, RepositoryError, ValidationError
from app.core.logging import get_logger, tenant_context
from app.db.unit_of_work import UnitOfWork
from app.schemas.common.tenant import TenantScope
from app.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


TData = TypeVar("TData")
TRepo = TypeVar("TRepo")
TSchema = TypeVar("TSchema", bound=PydanticModel)

# SQLSTATE for unique_violation
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exception: BaseException) -> bool:
    """True for a unique constraint failure, raised directly or wrapped by a repository."""
    cause = exception if isinstance(exception, IntegrityError) else exception.__cause__
    if not isinstance(cause, IntegrityError):
        return False
    if getattr(cause.orig, "pgcode", None) == _UNIQUE_VIOLATION:
        return True
    return "unique constraint" in str(cause.orig).lower()


class BaseService(Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Every operation wrapped in a unit of work
    - Domain exceptions converted to ServiceResult failures
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Primary repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self.uow = UnitOfWork(db_session)
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        callback: Callable[[], TData],
        entity_ref: Optional[Any] = None,
        message: Optional[str] = None,
        scope: Optional[TenantScope] = None,
    ) -> ServiceResult[TData]:
        """
        Run ``callback`` inside a unit of work and wrap the outcome.

        Domain exceptions become typed failures. Anything else is logged
        with full context and reported as an internal error. In both cases
        the unit of work has already rolled back.

        When called while another unit of work is open on the session, the
        operation joins it and exceptions propagate unchanged so the outer
        scope rolls back as a whole.
        """
        joined = self.uow.is_active
        with tenant_context(scope.org_id if scope is not None else None):
            try:
                with self.uow.begin():
                    data = callback()
                return ServiceResult.success(data, message=message)
            except Exception as e:
                if joined:
                    raise
                return self._failure(e, operation, entity_ref)

    def _failure(self, exception: Exception, operation: str, entity_ref: Optional[Any]) -> ServiceResult:
        if _is_unique_violation(exception):
            exception = DuplicateError(
                "Record already exists",
                {"operation": operation, "error": str(exception)},
            )
        elif isinstance(exception, RepositoryError) or not isinstance(exception, BaseAppException):
            return self._handle_exception(exception, operation, entity_ref)

        self._logger.warning(
            f"{operation} rejected: {exception.message}",
            extra={
                "operation": operation,
                "entity_ref": str(entity_ref) if entity_ref is not None else None,
                "error_code": exception.error_code.value,
            },
        )
        return ServiceResult.from_app_exception(exception)

    def _validate_input(self, schema_cls: Type[TSchema], data: Union[TSchema, Mapping[str, Any]]) -> TSchema:
        """
        Coerce ``data`` into ``schema_cls``.

        Raises:
            ValidationError: with per-field messages, before any write happens
        """
        if isinstance(data, schema_cls):
            return data
        try:
            return schema_cls.model_validate(data)
        except PydanticValidationError as e:
            field_errors: Dict[str, List[str]] = {}
            for err in e.errors():
                loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
                field_errors.setdefault(loc, []).append(err.get("msg", "invalid value"))
            raise ValidationError(
                f"Invalid {schema_cls.__name__} input",
                field_errors=field_errors,
            ) from e

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert an unexpected exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            severity: Error severity level
            additional_context: Extra context for logging/debugging
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }

        if additional_context:
            context.update(additional_context)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )

        error_code = (
            ErrorCode.DATABASE_ERROR
            if isinstance(exception, (SQLAlchemyError, RepositoryError))
            else ErrorCode.INTERNAL_ERROR
        )

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                    "context": additional_context,
                },
                severity=severity,
            )
        )

