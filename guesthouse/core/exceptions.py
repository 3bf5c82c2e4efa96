"""
Custom Exceptions for the Guest Accommodation Service

This module defines the error codes shared by every layer and the
exception classes raised by repositories and the HTTP layer.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Validation / referential errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    NOT_FOUND = "NOT_FOUND"

    # State-precondition errors
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CONFLICT = "CONFLICT"
    INVALID_STATE = "INVALID_STATE"
    ROOM_OCCUPIED = "ROOM_OCCUPIED"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    NOT_CHECKED_IN = "NOT_CHECKED_IN"

    # Redemption (one opaque signal for missing, used or expired passes)
    PASS_NOT_REDEEMABLE = "PASS_NOT_REDEEMABLE"

    # Security errors
    UNAUTHORIZED = "UNAUTHORIZED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Downstream-effect warnings
    PASS_ISSUANCE_FAILED = "PASS_ISSUANCE_FAILED"
    PASS_REVOCATION_FAILED = "PASS_REVOCATION_FAILED"
    ROOM_RELEASE_FAILED = "ROOM_RELEASE_FAILED"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_REFERENCE: 400,
    ErrorCode.PASS_NOT_REDEEMABLE: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.AUTHENTICATION_FAILED: 401,
    ErrorCode.INSUFFICIENT_PERMISSIONS: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.ROOM_OCCUPIED: 409,
    ErrorCode.REQUEST_NOT_PENDING: 409,
    ErrorCode.ALREADY_CHECKED_IN: 409,
    ErrorCode.NOT_CHECKED_IN: 409,
}


def status_for(code: ErrorCode) -> int:
    """HTTP status for an error code; unknown codes are server errors."""
    return ERROR_STATUS_MAP.get(code, 500)


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
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code if status_code is not None else status_for(error_code)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "code": self.error_code.value,
            "message": self.message,
            "details": self.details,
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
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED)


class AuthorizationError(BaseAppException):
    """Exception raised when authorization fails"""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        required_roles: Optional[List[str]] = None,
    ):
        details = {"required_roles": required_roles} if required_roles else {}
        super().__init__(message, ErrorCode.INSUFFICIENT_PERMISSIONS, details)


# ========================================
# Repository Exceptions
# ========================================

class RepositoryError(BaseAppException):
    """Raised when the backing store fails"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, ErrorCode.DATABASE_ERROR)


class EntityAlreadyExistsError(RepositoryError):
    """Raised when an insert or update violates a unique constraint"""

    def __init__(self, message: str = "Entity already exists"):
        super().__init__(message)
        self.error_code = ErrorCode.ALREADY_EXISTS
        self.status_code = status_for(ErrorCode.ALREADY_EXISTS)
