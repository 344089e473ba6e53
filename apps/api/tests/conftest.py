"""
Shared fixtures.

``mock_db`` is a stand-in AsyncSession for service unit tests. ``db`` is a
real session on an in-memory SQLite database for repository and end-to-end
lifecycle tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from schoolcms.core.clock import FrozenClock
from schoolcms.core.database import Base
from schoolcms.modules.careers.models import Career  # noqa: F401 - registers the table
from schoolcms.modules.users.models import User, UserRole

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def clock():
    """A clock frozen at NOW."""
    return FrozenClock(NOW)


@pytest_asyncio.fixture
async def db():
    """A session on a fresh in-memory SQLite database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def admin(db):
    """A persisted school admin."""
    user = User(
        email="admin@school.test",
        first_name="Ada",
        middle_name=None,
        last_name="Lovelace",
        role=UserRole.SCHOOL_ADMIN,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def editor(db):
    """A second persisted admin, used as updater."""
    user = User(
        email="editor@school.test",
        first_name="Grace",
        middle_name="Brewster",
        last_name="Hopper",
        role=UserRole.SUPER_ADMIN,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
