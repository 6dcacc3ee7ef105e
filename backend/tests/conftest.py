"""
Test Configuration

This module contains shared fixtures and configuration for tests. Every test
gets its own SQLite database file with the demo data bootstrapped.
"""

import os

# Settings are read at import time, so configure the environment first
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("AUTH_ARGON2_TIME_COST", "1")
os.environ.setdefault("AUTH_ARGON2_MEMORY_COST", "8")
os.environ.setdefault("AUTH_ARGON2_PARALLELISM", "1")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from kosh.db.session import create_db_engine, create_session_factory, get_db, init_db
from kosh.main import app
from kosh.models.user import User
from kosh.services.auth_service import AuthService
from kosh.services.bootstrap import bootstrap_demo_data

TEST_EMAIL = "merchant@example.com"
TEST_PASSWORD = "S3cure!pass"


@pytest.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine backed by a fresh SQLite file."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'kosh-test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def demo_user(session_factory) -> User:
    """Bootstrapped demo user with default settings, empty treasury and NAVs."""
    async with session_factory() as session:
        return await bootstrap_demo_data(session)


@pytest.fixture
async def client(session_factory, demo_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Create test client; each request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def registered_user(session_factory) -> User:
    async with session_factory() as session:
        return await AuthService(session).register(TEST_EMAIL, TEST_PASSWORD, "Test Merchant")


@pytest.fixture
async def auth_headers(client: AsyncClient, registered_user: User) -> Dict[str, str]:
    """Bearer headers for the registered test user."""
    response = await client.post(
        "/api/auth/login",
        json={"email": TEST_EMAIL, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
