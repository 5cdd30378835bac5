"""
Custom Exception Classes for Minerva CMS

This module defines custom exceptions for better error handling and
consistent error responses across the application. Each exception carries a
machine-readable ``ErrorCode`` that the exception handlers expose to clients.

Note that most bridging failures are not exceptions at all: a missing
library override, library template or owning record falls back to core
behavior silently. Only the conditions below are surfaced.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in the error envelope."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    ACCESS_DENIED = "ACCESS_DENIED"

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    UNKNOWN_RESOURCE_TYPE = "UNKNOWN_RESOURCE_TYPE"

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    INVALID_QUERY = "INVALID_QUERY"

    RECORD_SAVE_FAILED = "RECORD_SAVE_FAILED"
    RECORD_DELETE_FAILED = "RECORD_DELETE_FAILED"

    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"


class MinervaError(Exception):
    """Base exception class for all Minerva exceptions"""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authorization Exceptions
# ============================================================================


class AccessDeniedError(MinervaError):
    """Raised when an access rule for the requested action fails"""

    error_code = ErrorCode.ACCESS_DENIED

    def __init__(self, action: str, rule: str, redirect: str | None = None):
        self.action = action
        self.rule = rule
        self.redirect = redirect
        super().__init__(
            message=f"Access to '{action}' denied by rule '{rule}'",
            status_code=status.HTTP_403_FORBIDDEN,
            details={"action": action, "rule": rule, "redirect": redirect},
        )


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceNotFoundError(MinervaError):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with url '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class RecordNotFoundError(ResourceNotFoundError):
    """Raised when no record matches the requested url slug"""

    error_code = ErrorCode.RECORD_NOT_FOUND

    def __init__(self, resource_type: str, url: str | None = None):
        super().__init__(resource_type=resource_type, resource_id=url)


class UnknownResourceError(MinervaError):
    """Raised when a controller maps to a resource type with no model at all"""

    error_code = ErrorCode.UNKNOWN_RESOURCE_TYPE

    def __init__(self, resource_type: str | None):
        super().__init__(
            message=f"No model is registered for resource type '{resource_type}'",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type},
        )


# ============================================================================
# Validation & Persistence Exceptions
# ============================================================================


class ValidationError(MinervaError):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class InvalidQueryError(MinervaError):
    """Raised when a record store filter names a column the table does not have"""

    error_code = ErrorCode.INVALID_QUERY

    def __init__(self, resource_type: str, field: str):
        super().__init__(
            message=f"{resource_type} has no field '{field}' to filter on",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"resource_type": resource_type, "field": field},
        )


class RecordSaveError(MinervaError):
    """Raised by controllers when the model layer reports a failed save"""

    error_code = ErrorCode.RECORD_SAVE_FAILED

    def __init__(self, resource_type: str, url: str | None = None):
        super().__init__(
            message=f"The {resource_type.lower()} could not be saved, please try again.",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"resource_type": resource_type, "url": url},
        )


class RecordDeleteError(MinervaError):
    """Raised by controllers when the model layer reports a failed delete"""

    error_code = ErrorCode.RECORD_DELETE_FAILED

    def __init__(self, resource_type: str, url: str | None = None):
        super().__init__(
            message=f"The {resource_type.lower()} could not be deleted, please try again.",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"resource_type": resource_type, "url": url},
        )


# ============================================================================
# Rendering Exceptions
# ============================================================================


class TemplateNotFoundError(MinervaError):
    """Raised when the core fallback template or layout is missing"""

    error_code = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            message=f"Template '{path}' not found",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"path": path},
        )
