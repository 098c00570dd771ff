"""
Top-level pytest configuration.

Provides:
  - A fresh in-memory SQLite database (aiosqlite) with all tables created
    for every test, so writes never leak between tests.
  - A db_session fixture bound to that database.
  - An async_client fixture wired to the FastAPI app with get_db overridden.
  - Seeded users and convenience auth token fixtures.
  - A gateway_client helper building an httpx client on a MockTransport,
    so AI gateway calls never leave the process.
"""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator, Callable

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any app module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")
os.environ.setdefault("AI_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-gateway-key")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Per-test engine. StaticPool keeps the single in-memory connection alive so
# every session in the test sees the same database.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    """Create a SQLite engine with all tables for one test."""
    # Import Base here (after env vars are set) to ensure models register.
    from social_tracker.core.database import Base

    import social_tracker.models.user         # noqa: F401
    import social_tracker.models.interaction  # noqa: F401
    import social_tracker.models.user_stats   # noqa: F401

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for one test."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so all
    requests in a test share the same session and thus see any data seeded
    in that test.
    """
    from social_tracker.core.database import get_db
    from social_tracker.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# AI gateway
# ---------------------------------------------------------------------------
@pytest.fixture
def gateway_client() -> Callable[..., httpx.AsyncClient]:
    """
    Factory for an httpx client whose transport answers every request with
    the given handler. Requests seen are appended to client.requests_seen.
    """
    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        seen: list[httpx.Request] = []

        def _recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        client.requests_seen = seen
        return client

    return _build


# ---------------------------------------------------------------------------
# Seeded fixtures
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession):
    """Persisted user for integration tests."""
    from social_tracker.core.security import get_password_hash
    from social_tracker.models.user import User

    user = User(
        id=uuid.uuid4(),
        email="tracker@example.com",
        password_hash=get_password_hash("Password1"),
        full_name="Test Tracker",
        timezone="UTC",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession):
    """A second user, for ownership checks."""
    from social_tracker.core.security import get_password_hash
    from social_tracker.models.user import User

    user = User(
        id=uuid.uuid4(),
        email="other@example.com",
        password_hash=get_password_hash("Password1"),
        full_name="Other User",
        timezone="UTC",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def user_token(test_user) -> str:
    """Valid access token for the test user."""
    from social_tracker.core.security import create_access_token
    return create_access_token(data={"sub": str(test_user.id)})


@pytest.fixture
def other_token(other_user) -> str:
    from social_tracker.core.security import create_access_token
    return create_access_token(data={"sub": str(other_user.id)})


@pytest.fixture
def auth_headers(user_token: str) -> dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def other_auth_headers(other_token: str) -> dict[str, str]:
    """Authorization headers for the second user."""
    return {"Authorization": f"Bearer {other_token}"}
