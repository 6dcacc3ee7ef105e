"""
Database Session Module

This module manages database connections and sessions with:
- Async SQLAlchemy engine configuration
- Session factory and dependency injection
- Schema creation
- Connection health checks
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.engine import make_url

from kosh.core.logging import get_logger
from kosh.core.settings import settings
from kosh.db.base import Base

# Initialize logger
logger = get_logger(__name__)


def create_db_engine(database_url: str = settings.db.DATABASE_URL) -> AsyncEngine:
    """
    Create the async SQLAlchemy engine.

    Args:
        database_url: SQLAlchemy URL using an async driver

    Returns:
        AsyncEngine: Configured engine
    """
    url = make_url(database_url)
    options: Dict[str, Any] = {"echo": settings.db.ECHO, "pool_pre_ping": True}
    if not url.drivername.startswith("sqlite"):
        options.update(
            pool_size=settings.db.POOL_SIZE,
            max_overflow=settings.db.MAX_OVERFLOW,
            pool_recycle=settings.db.POOL_RECYCLE,
        )

    logger.info(
        "Creating database engine",
        extra={"database_url": url.render_as_string(hide_password=True)}
    )
    return create_async_engine(database_url, **options)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create engine instance
engine = create_db_engine()

# AsyncSessionLocal is a factory for new AsyncSession objects
AsyncSessionLocal = create_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Services commit their own units of work; anything left pending when a
    request fails is rolled back here.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.error("Database session error", exc_info=True)
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create all tables (safe to call multiple times)."""
    # Register every model on the metadata before create_all
    from kosh import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready", extra={"tables": sorted(Base.metadata.tables)})


async def check_db_connection(bind: AsyncEngine = engine) -> bool:
    """
    Check database connectivity.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        async with bind.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(
            "Database connection check failed",
            exc_info=True,
            extra={"error": str(e)}
        )
        return False


__all__ = [
    "AsyncSessionLocal",
    "engine",
    "create_db_engine",
    "create_session_factory",
    "get_db",
    "init_db",
    "check_db_connection",
]
