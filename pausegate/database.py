"""Database configuration and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from pausegate.config import settings


def engine_options() -> dict:
    """Engine keyword arguments for the configured database.

    SQLite and development runs get a NullPool; PostgreSQL in production
    keeps a pre-pinged connection pool sized from the settings.
    """
    options: dict = {"echo": settings.app_debug}
    if settings.is_sqlite or settings.is_development:
        options["poolclass"] = NullPool
        return options

    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )
    return options


def create_engine() -> AsyncEngine:
    """Create the async database engine."""
    return create_async_engine(settings.async_database_url, **engine_options())


# Global engine instance
engine = create_engine()

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for database session (for use outside of FastAPI dependencies)."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency wrapping get_db_context."""
    async with get_db_context() as session:
        yield session


async def init_db() -> None:
    """Initialize database (create tables if needed)."""
    from pausegate.models.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
