"""
Dashboard API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_engine:       fresh in-memory SQLite database with every resource table
    ├── db_session:      session on db_engine for seeding and assertions
    ├── test_client:     HTTPX AsyncClient → app, backed by db_engine
    ├── mock_client:     HTTPX AsyncClient → app, backed by mock_db_session
    └── seed_stores:     factory inserting N stores
"""

import os

# Settings are read when dashboard_api.config is first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dashboard_api.database import Base, get_db_session
from dashboard_api.models import Store


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession. Nothing is ever awaited against a real database.

    Usage:
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await resource_service.get_resource(mock_db_session, descriptor, "1")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """One private in-memory database per test; StaticPool keeps it alive."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app in-process, with get_db_session
    overridden to use the per-test database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/stores")
            assert response.status_code == 200
    """
    from dashboard_api.main import app

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def mock_client(mock_db_session):
    """Like test_client, but every request receives mock_db_session."""
    from dashboard_api.main import app

    async def override_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def seed_stores(session_factory):
    """
    Factory fixture: await seed_stores(40) inserts store-01 ... store-40
    and returns their ids in insertion order.
    """

    async def seed(count: int, **overrides):
        async with session_factory() as session:
            stores = [
                Store(
                    name=overrides.get("name", f"Store {index:02d}"),
                    slug=f"store-{index:02d}",
                    city=overrides.get("city", "Shanghai" if index % 2 else "Beijing"),
                    is_active=overrides.get("is_active", True),
                )
                for index in range(1, count + 1)
            ]
            session.add_all(stores)
            await session.commit()
            return [store.id for store in stores]

    return seed
