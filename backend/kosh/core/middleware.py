"""
Middleware Module

This module provides middleware components for:
- Correlation ID tracking
- Request/response logging
- Prometheus metrics
- Security headers injection

Each middleware is integrated with the logging system.
"""

import time
import uuid
from typing import Dict

from fastapi import Request, Response
from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from kosh.core.logging import correlation_id, get_logger

# Initialize logger
logger = get_logger(__name__)

# Prometheus metrics
REQUESTS_IN_PROGRESS = Gauge(
    "kosh_http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method"]
)

REQUEST_LATENCY = Histogram(
    "kosh_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

REQUESTS_TOTAL = Counter(
    "kosh_http_requests_total",
    "Total count of HTTP requests",
    ["method", "endpoint", "status"]
)

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def _route_template(request: Request) -> str:
    """Use the matched route path so metric labels stay bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to inject security headers into responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation ID for request tracing."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Correlation-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Extract or generate correlation ID and attach to context."""
        correlation_id_value = request.headers.get(
            self.header_name,
            str(uuid.uuid4())
        )

        token = correlation_id.set(correlation_id_value)
        request.state.correlation_id = correlation_id_value
        try:
            response = await call_next(request)
        finally:
            correlation_id.reset(token)

        response.headers[self.header_name] = correlation_id_value
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    @staticmethod
    def _sanitize_headers(headers: Dict[str, str]) -> Dict[str, str]:
        """Remove sensitive information from headers."""
        return {
            k: ("***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v)
            for k, v in headers.items()
        }

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        logger.debug(
            "Incoming request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "client_ip": request.client.host if request.client else None,
                "headers": self._sanitize_headers(dict(request.headers))
            }
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2)
            }
        )

        return response


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware for Prometheus metrics collection."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        method = request.method
        REQUESTS_IN_PROGRESS.labels(method=method).inc()

        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = _route_template(request)
            REQUEST_LATENCY.labels(
                method=method,
                endpoint=endpoint
            ).observe(time.perf_counter() - start_time)
            REQUESTS_TOTAL.labels(
                method=method,
                endpoint=endpoint,
                status=status_code
            ).inc()
            REQUESTS_IN_PROGRESS.labels(method=method).dec()
