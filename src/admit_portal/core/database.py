"""
Database Configuration

Async SQLAlchemy engine and session factory. The engine and session maker
are built per application and kept on ``app.state``; request handlers get a
session through the ``get_db`` dependency.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def get_database_url(url: str) -> str:
    """Normalise plain driver URLs to their async drivers."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def create_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine.

    SQLite runs with NullPool so every session opens its own connection;
    other databases use the default pool with pre-ping.
    """
    db_url = get_database_url(url)
    if db_url.startswith("sqlite"):
        return create_async_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    return create_async_engine(db_url, echo=echo, pool_pre_ping=True)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine, *, create_tables: bool = False) -> None:
    """
    Check the database connection, optionally creating missing tables.

    Call this on application startup.
    """
    # Import models so they register on Base.metadata
    from admit_portal.modules.applications import models as _applications  # noqa: F401
    from admit_portal.modules.users import models as _users  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if create_tables:
            await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Dispose the engine's connection pool."""
    await engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a database session.

    Usage:
        @router.get("/")
        async def index(db: AsyncSession = Depends(get_db)):
            ...
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        yield session
