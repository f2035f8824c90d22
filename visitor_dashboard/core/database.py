from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from visitor_dashboard.core.config import settings


def get_database_url() -> str:
    """Normalize plain ``postgresql://`` URLs to the asyncpg driver."""
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


def _create_engine():
    db_url = get_database_url()
    if db_url.startswith("sqlite"):
        return create_async_engine(db_url, echo=settings.DB_ECHO, poolclass=NullPool)
    return create_async_engine(db_url, echo=settings.DB_ECHO, pool_pre_ping=True)


engine = _create_engine()
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency: one session per request, committed on success."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency: the session factory, for handlers that fan out concurrent queries."""
    return async_session
