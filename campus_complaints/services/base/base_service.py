"""
Base service class providing common functionality for all services.
"""

from typing import Optional, Dict, Any
from contextlib import contextmanager

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import SQLAlchemyError

from campus_complaints.config.logging import get_logger
from campus_complaints.core.clock import Clock, SystemClock
from campus_complaints.core.exceptions import (
    AuthorizationError,
    ConcurrencyConflictError,
    DuplicateEntryError,
    ResourceNotFoundError,
    ValidationError,
)
from campus_complaints.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger, clock and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
            clock: Time source for timestamps (system UTC clock by default)
        """
        self.db: Session = db_session
        self.clock: Clock = clock or SystemClock()
        self._logger = get_logger(self.__class__.__name__)

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
        Convert exception to a ServiceResult failure with logging.

        Domain exceptions (validation, not found, access denied, conflicts)
        are expected outcomes and are logged at WARNING without a traceback.
        Anything else is logged at ERROR with the traceback.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            severity: Error severity level for unexpected failures
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

        error_code = self._map_exception_to_error_code(exception)

        if error_code == ErrorCode.INTERNAL_ERROR:
            self._logger.error(
                f"Error during {operation}: {exception}",
                exc_info=True,
                extra=context,
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

        self._logger.warning(f"{operation} rejected: {exception}", extra=context)

        message = exception.message
        details = dict(exception.details)
        if entity_ref is not None:
            details.setdefault("entity_ref", str(entity_ref))

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                details=details,
                field=getattr(exception, "field", None),
                severity=ErrorSeverity.WARNING,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to appropriate error codes.

        Args:
            exception: The exception to map

        Returns:
            Appropriate ErrorCode for the exception
        """
        exception_mapping = (
            (ValidationError, ErrorCode.VALIDATION_ERROR),
            (ResourceNotFoundError, ErrorCode.NOT_FOUND),
            (AuthorizationError, ErrorCode.INSUFFICIENT_PERMISSIONS),
            (ConcurrencyConflictError, ErrorCode.CONFLICT),
            (DuplicateEntryError, ErrorCode.ALREADY_EXISTS),
            (SQLAlchemyError, ErrorCode.INTERNAL_ERROR),
        )

        for exc_type, error_code in exception_mapping:
            if isinstance(exception, exc_type):
                return error_code

        return ErrorCode.INTERNAL_ERROR

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(
        self,
        auto_commit: bool = True,
        resource_type: str = "Record",
        resource_id: Optional[Any] = None,
    ):
        """
        Context manager for database transactions with automatic rollback.

        Args:
            auto_commit: Whether to commit automatically on success
            resource_type: Name reported when a concurrent change is detected
            resource_id: Identifier reported with it

        Yields:
            The database session

        Example:
            with self.transaction():
                complaint.status = ComplaintStatus.RESOLVED
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit(resource_type, resource_id)
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction aborted: {e}")
            raise

    def _commit(self, resource_type: str = "Record", resource_id: Optional[Any] = None) -> None:
        """
        Commit the current transaction with error handling.

        Raises:
            ConcurrencyConflictError: A versioned row changed since it was loaded
        """
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except StaleDataError as e:
            self._logger.warning(f"Commit rejected, {resource_type} {resource_id} changed concurrently: {e}")
            self._rollback()
            raise ConcurrencyConflictError(resource_type, resource_id) from e
        except Exception as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")

