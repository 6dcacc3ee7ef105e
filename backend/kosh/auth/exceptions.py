"""Custom exceptions for authentication-related errors."""
from fastapi import HTTPException, status


class AuthError(HTTPException):
    """Base class for authentication errors."""

    def __init__(self, detail: str):
        """Initialize with status code and WWW-Authenticate header."""
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class MissingTokenError(AuthError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self):
        super().__init__("Missing Authorization header")


class TokenValidationError(AuthError):
    """Raised when JWT token validation fails or the token has expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)
