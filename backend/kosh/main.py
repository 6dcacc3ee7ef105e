"""
Kosh - Main Application Entry Point

This module initializes the FastAPI application with all necessary middleware,
monitoring tools, and route configurations. It sets up:
- Prometheus metrics and instrumentation
- Sentry error tracking when a DSN is configured
- Logging middleware with correlation IDs
- CORS and security headers
- Database schema and demo data on startup
- API route registration
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import sentry_sdk
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from kosh.api.v1.api import api_router
from kosh.api.v1.routes import health
from kosh.core.error_handler import register_exception_handlers
from kosh.core.logging import get_logger, log_duration, setup_logging
from kosh.core.middleware import (
    CorrelationIDMiddleware,
    PrometheusMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from kosh.core.settings import settings
from kosh.db.base import utcnow
from kosh.db.session import AsyncSessionLocal, check_db_connection, engine, init_db
from kosh.services.bootstrap import bootstrap_demo_data

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Create the schema and demo data on startup; dispose the engine on shutdown.
    """
    try:
        with log_duration(logger, "Startup"):
            await init_db()
            async with AsyncSessionLocal() as db:
                await bootstrap_demo_data(db)
        logger.info(
            "Application started",
            extra={"environment": settings.app.ENVIRONMENT, "port": settings.app.PORT}
        )
        yield
    except Exception as e:
        logger.error(f"Startup failed: {str(e)}", exc_info=True)
        raise
    finally:
        logger.info("Shutting down application...")
        await engine.dispose()


def init_sentry() -> None:
    if not settings.logging.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=settings.logging.SENTRY_DSN,
        environment=settings.app.ENVIRONMENT,
        release=settings.app.VERSION,
        traces_sample_rate=settings.logging.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
    )


def create_application() -> FastAPI:
    """
    Creates and configures the FastAPI application with all middleware and routes.
    """
    init_sentry()

    app = FastAPI(
        title=settings.app.TITLE,
        description=settings.app.DESCRIPTION,
        version=settings.app.VERSION,
        docs_url="/docs" if not settings.app.is_production else None,
        redoc_url="/redoc" if not settings.app.is_production else None,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Registration and login"},
            {"name": "transactions", "description": "Payments and auto-save"},
            {"name": "treasury", "description": "Treasury balance and ledger"},
            {"name": "investments", "description": "Mock fund positions and NAVs"},
        ]
    )

    # Add CORS middleware with configuration from settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.CORS_ORIGINS,
        allow_origin_regex=settings.security.CORS_ORIGIN_REGEX,
        allow_credentials=settings.security.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.security.CORS_ALLOW_METHODS,
        allow_headers=settings.security.CORS_ALLOW_HEADERS,
    )

    # Last added runs first: correlation id is set before logging and metrics
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(api_router, prefix="/api")

    @app.get("/healthz", tags=["health"])
    async def health_check():
        """
        Health check endpoint for monitoring.
        Verifies database connectivity.
        """
        if not await check_db_connection():
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "timestamp": utcnow().isoformat()}
            )
        return {
            "status": "healthy",
            "timestamp": utcnow().isoformat(),
            "version": settings.app.VERSION,
            "environment": settings.app.ENVIRONMENT
        }

    return app


# Create the FastAPI application instance
app = create_application()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "kosh.main:app",
        host=settings.app.HOST,
        port=settings.app.PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_config=None,  # Use our custom logging config
        proxy_headers=True,
    )


if __name__ == "__main__":
    run()
