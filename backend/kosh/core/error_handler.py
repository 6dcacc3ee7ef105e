"""
Error Handling Module

This module maps exceptions onto standardized JSON error responses with:
- Application exception hierarchy handling
- Request validation handling
- Logging integration
- Metrics tracking
- Environment-aware error details
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import prometheus_client
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException

from kosh.core.exceptions import AppException
from kosh.core.logging import correlation_id, get_logger
from kosh.core.settings import settings

# Initialize logger
logger = get_logger(__name__)

# Prometheus metrics for error tracking
ERROR_COUNTER = prometheus_client.Counter(
    "kosh_api_errors_total",
    "Total count of API errors",
    ["error_type", "status_code"]
)


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    error: str
    message: str
    error_code: str = Field(serialization_alias="errorCode")
    correlation_id: str = Field(serialization_alias="correlationId")
    path: str
    timestamp: str
    details: Optional[Any] = None


def create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        request: FastAPI request object
        status_code: HTTP status code
        message: Error message
        error_code: Error code for client identification
        details: Optional additional error details
        headers: Optional response headers

    Returns:
        JSON response carrying the error body
    """
    # Unhandled errors arrive after the correlation middleware reset its context
    cid = correlation_id.get() or getattr(request.state, "correlation_id", "")
    body = ErrorResponse(
        error=message,
        message=message,
        error_code=error_code,
        correlation_id=cid,
        path=str(request.url.path),
        timestamp=datetime.now(timezone.utc).isoformat(),
        details=details
    )
    if cid:
        headers = {**(headers or {}), "X-Correlation-ID": cid}
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True, exclude_none=True)),
        headers=headers
    )


async def handle_app_exception(
    request: Request,
    exc: AppException
) -> JSONResponse:
    """Handle custom application exceptions."""
    logger.warning(
        f"Application error: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "details": exc.extra
        }
    )

    ERROR_COUNTER.labels(
        error_type=exc.__class__.__name__,
        status_code=exc.status_code
    ).inc()

    return create_error_response(
        request=request,
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.extra or None
    )


async def handle_validation_error(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    error_details: List[Dict[str, str]] = []
    for error in exc.errors():
        error_details.append({
            "loc": " -> ".join(str(x) for x in error["loc"]),
            "msg": error["msg"],
            "type": error["type"]
        })

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "validation_errors": error_details
        }
    )

    ERROR_COUNTER.labels(
        error_type="RequestValidationError",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    ).inc()

    first = error_details[0] if error_details else None
    message = f"{first['loc']}: {first['msg']}" if first else "Request validation failed"

    return create_error_response(
        request=request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message=message,
        error_code="VALIDATION_ERROR",
        details={"errors": error_details}
    )


async def handle_http_exception(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP error: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method
        }
    )

    ERROR_COUNTER.labels(
        error_type="HTTPException",
        status_code=exc.status_code
    ).inc()

    return create_error_response(
        request=request,
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None)
    )


async def handle_generic_exception(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle any unhandled exceptions."""
    logger.critical(
        f"Unhandled error: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )

    ERROR_COUNTER.labels(
        error_type=exc.__class__.__name__,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    ).inc()

    return create_error_response(
        request=request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal Server Error",
        error_code="INTERNAL_SERVER_ERROR",
        details={"exception": str(exc)} if settings.app.DEBUG else None
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)

    logger.debug("Exception handlers registered")


__all__ = [
    "ErrorResponse",
    "handle_app_exception",
    "handle_validation_error",
    "handle_http_exception",
    "handle_generic_exception",
    "register_exception_handlers",
]
