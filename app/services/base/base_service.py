"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.core.exceptions import BaseAppException, DatabaseError, ErrorCode
from app.models.room.room_allocation import ACTIVE_STUDENT_INDEX
from app.repositories.base.base_repository import BaseRepository
from app.services.base.service_result import (
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from app.services.base.transaction_manager import TransactionContext, TransactionManager


TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._transactions = TransactionManager(db_session)
        self._logger = get_logger(f"app.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Domain exceptions keep their code, message and HTTP status.
        ``IntegrityError`` becomes a conflict; other database errors and
        unexpected exceptions become 500-class failures.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            self._logger.warning(f"{operation} rejected: {exception.message}", extra=context)
            return ServiceResult.from_app_exception(exception)

        if isinstance(exception, IntegrityError):
            self._logger.warning(f"Integrity violation during {operation}: {exception.orig}", extra=context)
            return ServiceResult.failure(self._integrity_error(exception))

        self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)

        if isinstance(exception, SQLAlchemyError):
            return ServiceResult.from_app_exception(
                DatabaseError(f"Failed to {operation}", operation=operation),
                severity=ErrorSeverity.CRITICAL,
            )

        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                },
                severity=ErrorSeverity.CRITICAL,
            )
        )

    @staticmethod
    def _integrity_error(exception: IntegrityError) -> ServiceError:
        """Map a constraint violation to the matching conflict error."""
        text = str(exception.orig)
        if ACTIVE_STUDENT_INDEX in text or "room_allocations.student_id" in text:
            return ServiceError(
                code=ErrorCode.STUDENT_ALREADY_ALLOCATED,
                message="Student already has an active room allocation. Please deallocate first.",
                severity=ErrorSeverity.WARNING,
            )
        return ServiceError(
            code=ErrorCode.DUPLICATE_ENTRY,
            message="Record conflicts with an existing entry",
            details={"error": text},
            severity=ErrorSeverity.WARNING,
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, isolation_level: Optional[str] = None) -> Iterator[TransactionContext]:
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(data)
                # automatic commit on success, rollback on exception
        """
        with self._transactions.start(isolation_level=isolation_level) as ctx:
            yield ctx

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log service operation with standardized format.

        Args:
            operation: Description of the operation
            entity_ref: Reference to the entity involved
            extra: Additional context to log
        """
        context = {"entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)

        self._logger.info(f"Operation: {operation}", extra=context)
