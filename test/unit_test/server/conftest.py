from typing import AsyncGenerator, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from herit.core.database import create_all, create_sessionmaker

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

REGISTRATION: Dict[str, str] = {
    "email": "aoife@example.ie",
    "password": "correct-horse-battery",
    "first_name": "Aoife",
    "last_name": "Byrne",
}


@pytest_asyncio.fixture(name="test_engine")
async def test_engine_fixture():
    """Create a fresh in-memory database with every table for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    from herit.server.services.rate_limit import login_rate_limit, register_rate_limit

    login_rate_limit.reset()
    register_rate_limit.reset()
    yield
    login_rate_limit.reset()
    register_rate_limit.reset()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from herit.core.database import get_session
    from herit.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("herit.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def registration() -> Dict[str, str]:
    return dict(REGISTRATION)


@pytest_asyncio.fixture(name="auth_client")
async def auth_client_fixture(client: AsyncClient, registration) -> AsyncClient:
    """Client holding the session cookies of a freshly registered user."""
    response = await client.post("/api/auth/register", json=registration)
    assert response.status_code == 201, response.text
    return client
