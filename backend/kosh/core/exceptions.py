"""Application exception hierarchy mapped to HTTP responses by the error handler."""
from typing import Any, Dict, Optional

from fastapi import status


class AppException(Exception):
    """Base exception class for all application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        extra: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.extra = extra or {}
        super().__init__(message)


class ValidationException(AppException):
    """Raised when a request is well-formed but its values are unacceptable."""

    def __init__(
        self,
        message: str = "Validation error",
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            extra=extra
        )


class InvalidCredentialsException(AppException):
    """Raised when authentication credentials are invalid."""

    def __init__(
        self,
        message: str = "Invalid credentials",
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="INVALID_CREDENTIALS",
            extra=extra
        )


class PermissionDeniedException(AppException):
    """Raised when an operation is not allowed in the current environment."""

    def __init__(
        self,
        message: str = "Permission denied",
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
            extra=extra
        )


class ResourceNotFoundException(AppException):
    """Raised when requested resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
            extra=extra
        )


class InsufficientFundsException(AppException):
    """Raised when a treasury or investment balance cannot cover a movement."""

    def __init__(
        self,
        message: str = "Insufficient funds",
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INSUFFICIENT_FUNDS",
            extra=extra
        )


class EmailAlreadyRegisteredException(AppException):
    """Raised when email is already registered."""

    def __init__(self, message: str = "Email already in use"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="EMAIL_IN_USE"
        )
