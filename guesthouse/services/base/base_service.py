"""
Base service class providing common functionality for all services.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Generic, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings, get_settings
from guesthouse.core.exceptions import (
    EntityAlreadyExistsError,
    ErrorCode,
    RepositoryError,
)
from guesthouse.core.logging import get_logger
from guesthouse.repositories.base.base_repository import BaseRepository
from guesthouse.services.base.service_result import (
    ServiceError,
    ServiceResult,
)
from guesthouse.utils.datetime_utils import Clock

TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(ABC, Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger, db session, settings and clock
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(
        self,
        repository: TRepo,
        db_session: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
            settings: Application settings (defaults to the cached settings)
            clock: Source of "now" and the local calendar
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self.settings = settings or get_settings()
        self.clock = clock or Clock(self.settings.TIMEZONE)
        self._logger = get_logger(f"{__name__}.{self.__class__.__name__}")

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

        The exception text is logged, never returned: storage error detail
        must not reach API callers.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved
            additional_context: Extra context for logging
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code = self._map_exception_to_error_code(exception)
        if error_code in (ErrorCode.CONFLICT, ErrorCode.ALREADY_EXISTS):
            self._logger.info(f"Conflict during {operation}", extra=context)
            message = f"Failed to {operation}: conflicting record"
        else:
            self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
            message = f"Failed to {operation}"

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                details={"entity_ref": context["entity_ref"]} if entity_ref is not None else None,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to error codes.
        """
        exception_mapping = (
            (EntityAlreadyExistsError, ErrorCode.CONFLICT),
            (IntegrityError, ErrorCode.CONFLICT),
            (RepositoryError, ErrorCode.DATABASE_ERROR),
            (SQLAlchemyError, ErrorCode.DATABASE_ERROR),
            (PermissionError, ErrorCode.INSUFFICIENT_PERMISSIONS),
        )
        for exc_type, error_code in exception_mapping:
            if isinstance(exception, exc_type):
                return error_code
        return ErrorCode.INTERNAL_ERROR

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(entity)
                # commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction rolled back: {type(e).__name__}")
            raise

    def _commit(self) -> None:
        """Commit the current transaction."""
        try:
            self.db.commit()
        except IntegrityError as e:
            raise EntityAlreadyExistsError("Commit violated a unique constraint") from e
        except SQLAlchemyError as e:
            raise RepositoryError("Commit failed") from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            # Rollback errors should not mask the original error
            self._logger.warning(f"Rollback failed: {e}")

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
        Log a committed state change with standardized fields.
        """
        context = {"operation": operation, "entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)
        self._logger.info(f"{operation} completed", extra=context)
