"""
Custom Exceptions for the Campus Complaints Application

This module defines the exception taxonomy raised by the policy core and
the service layer. Not-found and access-denied stay distinct so the
boundary layer can decide whether to reveal that a complaint exists.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authorization
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATUS = "INVALID_STATUS"
    RECIPIENT_MISSING = "RECIPIENT_MISSING"
    INVALID_FILE = "INVALID_FILE"

    # Persistence errors
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Background processing
    SWEEP_FAILED = "SWEEP_FAILED"


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
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
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
    """Exception raised when input validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if field_errors:
            details["field_errors"] = field_errors
        super().__init__(message, error_code, details)
        self.field = field

    @classmethod
    def from_pydantic(cls, exc: Any, message: str = "Validation failed") -> "ValidationError":
        """Build from a pydantic ``ValidationError``, keyed by field path"""
        field_errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            path = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
            field_errors.setdefault(path, []).append(error.get("msg", "Invalid value"))
        field = next(iter(field_errors)) if len(field_errors) == 1 else None
        return cls(message, field=field, field_errors=field_errors)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None,
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class AuthorizationError(BaseAppException):
    """Exception raised when authorization fails"""

    def __init__(
        self,
        message: str = "Access denied",
        required_permission: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.AUTHORIZATION_FAILED
    ):
        details = {"required_permission": required_permission} if required_permission else {}
        super().__init__(message, error_code, details)
        self.required_permission = required_permission


class AccessDeniedError(AuthorizationError):
    """Raised when an actor may not read or mutate a specific complaint"""

    def __init__(
        self,
        action: str,
        user_id: Optional[str] = None,
        complaint_id: Optional[int] = None,
    ):
        message = f"User {user_id} is not allowed to {action}"
        if complaint_id is not None:
            message += f" on complaint {complaint_id}"
        super().__init__(message, required_permission=action)
        self.details.update({"user_id": user_id, "complaint_id": complaint_id})
        self.action = action
        self.user_id = user_id
        self.complaint_id = complaint_id


class ConcurrencyConflictError(BaseAppException):
    """Raised when a record changed underneath a read-modify-write"""

    def __init__(self, resource_type: str, resource_id: Optional[Any] = None):
        message = f"{resource_type} was modified concurrently"
        if resource_id is not None:
            message += f" (ID: {resource_id})"
        super().__init__(
            message,
            ErrorCode.CONCURRENCY_CONFLICT,
            {"resource_type": resource_type, "resource_id": str(resource_id) if resource_id is not None else None},
        )


class DuplicateEntryError(BaseAppException):
    """Raised when a unique value is already taken"""

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            f"{resource_type} with {field}='{value}' already exists",
            ErrorCode.DUPLICATE_ENTRY,
            {"resource_type": resource_type, "field": field},
        )


class SweepError(BaseAppException):
    """Raised when an escalation sweep run fails and is abandoned"""

    def __init__(self, message: str = "Escalation sweep failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.SWEEP_FAILED, details)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "AuthorizationError",
    "AccessDeniedError",
    "ConcurrencyConflictError",
    "DuplicateEntryError",
    "SweepError",
]
