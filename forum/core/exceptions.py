"""
Custom Exception Classes for the Application
Provides a unified error handling system with proper HTTP status codes and messages.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    """
    Base exception class for all application exceptions.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "error_code": error_code,
                "message": message,
                "details": self.details,
            },
            headers=headers,
        )

    def __str__(self) -> str:
        return self.message


# ==================== Resource Exceptions ====================


class ResourceNotFoundException(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Optional[Any] = None):
        details = {}
        if identifier is not None:
            details["identifier"] = str(identifier)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="resource_not_found",
            message=f"{resource} not found",
            details=details,
        )


# ==================== Validation Exceptions ====================


class ValidationException(AppException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "validation_error",
    ):
        details = {}
        if field:
            details["field"] = field

        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
            message=message,
            details=details,
        )


class TranslationInputException(ValidationException):
    """Raised when translatable content is missing from a post-like payload."""

    def __init__(self):
        super().__init__(
            message="Content is required for translation",
            field="content",
            error_code="invalid_content",
        )


class InvalidUidException(ValidationException):
    """Raised when a post is submitted without a user id."""

    def __init__(self):
        super().__init__(
            message="Invalid user id",
            field="uid",
            error_code="invalid_uid",
        )


class InvalidPidException(ValidationException):
    """Raised when a reply targets a post that does not exist or was deleted."""

    def __init__(self, pid: Optional[Any] = None):
        super().__init__(
            message="Invalid post id",
            field="to_pid",
            error_code="invalid_pid",
        )
        if pid is not None:
            self.details["identifier"] = str(pid)


# ==================== External Service Exceptions ====================


class ExternalServiceException(AppException):
    """Raised when an external service fails."""

    def __init__(
        self,
        service_name: str,
        message: Optional[str] = None,
        *,
        timed_out: bool = False,
    ):
        self.service_name = service_name
        self.timed_out = timed_out
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="external_service_error",
            message=message or f"{service_name} service is currently unavailable",
            details={"service": service_name, "timed_out": timed_out},
        )
