import os
import tempfile

# Must be set before the application modules read their settings
os.environ["ENVIRONMENT"] = "testing"
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TEST_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["PUBLIC_BASE_URL"] = "http://test"
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="freedom-wall-storage-"))

import pytest
import httpx
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from freedom_wall.main import app
from freedom_wall.db.session import get_db
from freedom_wall.models import Base
from freedom_wall.client.notifications import Notifier
from freedom_wall.client.store_client import WallStoreClient

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest.fixture
async def test_engine():
    """Fresh in-memory database with tables for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session

@pytest.fixture
async def test_client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app with the test database injected"""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

@pytest.fixture
def request_log(test_client):
    """Records (method, path) of every request the test client sends"""
    log = []

    async def record(request: httpx.Request):
        log.append((request.method, request.url.path))

    test_client.event_hooks = {"request": [record], "response": []}
    return log

@pytest.fixture
def store(test_client) -> WallStoreClient:
    return WallStoreClient(http_client=test_client)

@pytest.fixture
def notifier() -> Notifier:
    return Notifier()
