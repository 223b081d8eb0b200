"""Pytest configuration and fixtures for backend tests.

Database Handling:
- Uses TEST_DATABASE_URL when set (e.g. a PostgreSQL test database)
- Otherwise every test gets a throw-away SQLite file via aiosqlite
"""

import os
import tempfile
import uuid
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-athena-flow-tests-0123456789"
os.environ["GROQ_API_KEY"] = "test-groq-key"
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / 'athena_flow_app.db'}",
)

# Test user credentials
TEST_USER_NAME = "Test Student"
TEST_USER_EMAIL = "student@example.com"
TEST_USER_PASSWORD = "correct-horse"


def pytest_collection_modifyitems(config, items):
    """Tag tests by directory so `-m unit` / `-m integration` select them."""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


# --- Rate Limiter Reset Fixture ---


def _reset_rate_limiter_state():
    """Clear all rate limit records on the shared limiter.

    The singleton itself is kept: route handlers look it up on every call,
    so clearing its records is enough to isolate tests.
    """
    from app.services.rate_limiter import RateLimiter

    RateLimiter.get_instance().reset()


@pytest.fixture(autouse=True)
def reset_rate_limiter(request):
    """Reset rate limiter before each test to avoid 429 errors.

    Tests marked with pytest.mark.skip_rate_limiter_reset will skip this
    fixture (useful for config tests that reload the config module).
    """
    if request.node.get_closest_marker("skip_rate_limiter_reset"):
        yield
        return

    _reset_rate_limiter_state()
    yield
    _reset_rate_limiter_state()


# --- Database Fixtures ---


@pytest.fixture
def database_url(tmp_path) -> str:
    explicit_url = os.environ.get("TEST_DATABASE_URL")
    if explicit_url:
        return explicit_url
    return f"sqlite+aiosqlite:///{tmp_path / 'athena_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url):
    """Create a database engine with a fresh schema for one test."""
    from app.models.base import BaseModel

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_completion_client() -> MagicMock:
    """Completion client stand-in; configure return values per test."""
    from app.services.llm import CompletionClient

    client = MagicMock(spec=CompletionClient)
    client.chat = AsyncMock(return_value="Try spaced repetition.")
    client.generate_revision_slots = AsyncMock(return_value=[])
    client.generate_diagnostic_questions = AsyncMock(return_value=[])
    return client


@pytest_asyncio.fixture(scope="function")
async def async_client(
    db_session: AsyncSession,
    mock_completion_client: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database and completion overrides."""
    from app.core.database import get_db
    from app.main import app
    from app.services.llm import get_completion_client

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: mock_completion_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture(scope="module")
def sync_client() -> Generator[TestClient, None, None]:
    """Create a synchronous test client for endpoints that need no database."""
    from app.main import app

    with TestClient(app) as client:
        yield client


# --- Test Factories ---


@pytest.fixture
def user_factory(db_session):
    """Factory for creating test User objects."""
    from app.models.user import User
    from app.services.auth import hash_password

    async def _create_user(
        name: str = TEST_USER_NAME,
        email: str | None = None,
        password: str = TEST_USER_PASSWORD,
        **kwargs,
    ) -> User:
        user = User(
            name=name,
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
            **kwargs,
        )
        db_session.add(user)
        await db_session.flush()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def session_headers():
    """Build request headers carrying a session cookie for a user."""
    from app.core import settings
    from app.services.auth import issue_token

    def _headers(user) -> dict[str, str]:
        token = issue_token(user.id, user.email)
        return {"Cookie": f"{settings.session_cookie_name}={token}"}

    return _headers


@pytest_asyncio.fixture
async def test_user(user_factory):
    return await user_factory(email=TEST_USER_EMAIL)


@pytest.fixture
def auth_headers(test_user, session_headers) -> dict[str, str]:
    """Session cookie headers for the default test user."""
    return session_headers(test_user)
