"""
Pytest configuration and fixtures.
Provides an in-memory database, seeded users and a test app client whose
requests run against the same database.
"""

import os

# Settings are read at import time
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from types import SimpleNamespace
from typing import Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from timesheet_api.main import app
from timesheet_api.db.base import Base
from timesheet_api.db.session import get_db
from timesheet_api.models import User, UserRole


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def users(test_db_session) -> SimpleNamespace:
    """
    Seed a small organisation:
    manager -> owner, teammate; other_manager has no reports; inactive user.
    """
    manager = User(email="manager@example.com", first_name="Mona", last_name="Gray", role=UserRole.MANAGER)
    other_manager = User(email="other.manager@example.com", first_name="Omar", last_name="Reed", role=UserRole.MANAGER)
    test_db_session.add_all([manager, other_manager])
    await test_db_session.flush()

    owner = User(
        email="owner@example.com",
        first_name="Olive",
        last_name="Hart",
        role=UserRole.USER,
        manager_id=manager.id,
    )
    teammate = User(
        email="teammate@example.com",
        first_name="Tariq",
        last_name="Lane",
        role=UserRole.USER,
        manager_id=manager.id,
    )
    inactive = User(
        email="former@example.com",
        first_name="Fern",
        last_name="Moss",
        role=UserRole.USER,
        manager_id=manager.id,
        is_active=False,
    )
    test_db_session.add_all([owner, teammate, inactive])
    await test_db_session.commit()

    return SimpleNamespace(
        manager=manager,
        other_manager=other_manager,
        owner=owner,
        teammate=teammate,
        inactive=inactive,
    )


@pytest.fixture(scope="function")
async def test_client(test_session_maker, users):
    """
    Create a test HTTP client.
    Each request gets its own session, committed on success and rolled back on error.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def _headers(user: User) -> Dict[str, str]:
    return {"X-User-Id": str(user.id)}


@pytest.fixture
def owner_headers(users) -> Dict[str, str]:
    return _headers(users.owner)


@pytest.fixture
def manager_headers(users) -> Dict[str, str]:
    return _headers(users.manager)


@pytest.fixture
def other_manager_headers(users) -> Dict[str, str]:
    return _headers(users.other_manager)
