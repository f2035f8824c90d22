"""Shared fixtures: a throwaway SQLite database per test and an API client bound to it."""

import os
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Configure before anything imports the settings object
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TIMEZONE"] = "UTC"

from visitor_dashboard.core.database import get_db, get_session_factory  # noqa: E402
from visitor_dashboard.core.rate_limiter import limiter  # noqa: E402
from visitor_dashboard.core.security import create_access_token, hash_password  # noqa: E402
from visitor_dashboard.main import app  # noqa: E402
from visitor_dashboard.models import AdminUser, Base, Visitor  # noqa: E402

ADMIN_PASSWORD = "admin123"


@pytest.fixture
async def engine(tmp_path):
    # File-backed so the concurrent stats sessions all see the same data
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'visitors.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def add_visitors(session_factory):
    """Insert visitor rows; ``type``/``host``/``purpose`` default if omitted."""

    async def _add(*rows: dict) -> list[Visitor]:
        visitors = [
            Visitor(**{"type": "guest", "host": "Alice", "purpose": "Meeting", **row})
            for row in rows
        ]
        async with session_factory() as session:
            session.add_all(visitors)
            await session.commit()
        return visitors

    return _add


@pytest.fixture
async def admin(session_factory) -> AdminUser:
    user = AdminUser(username="admin", hashed_password=hash_password(ADMIN_PASSWORD))
    async with session_factory() as session:
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user


@pytest.fixture
def auth_headers(admin: AdminUser) -> dict:
    token = create_access_token(admin.id, admin.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    # Every test client shares one address, start each test with fresh counters
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
