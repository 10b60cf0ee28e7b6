"""Database engine and session management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import get_settings
from .base import SQLModel

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

settings = get_settings()

engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_pre_ping=True,
)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an ``AsyncSession`` for request-scoped work."""
    async with async_session_maker() as session:
        yield session


def get_session_factory() -> SessionFactory:
    """Return the factory used when a unit of work needs sessions of its own."""
    return async_session_maker


@asynccontextmanager
async def isolated_session_factory(database_url: str | None = None) -> AsyncIterator[SessionFactory]:
    """Yield a session factory backed by an unpooled engine, disposed on exit.

    Work that runs inside its own event loop (RQ jobs, the CLI) cannot reuse
    connections pooled by the application engine.
    """
    isolated = create_async_engine(
        database_url or settings.database_url,
        echo=settings.db_echo,
        poolclass=NullPool,
    )
    try:
        yield async_sessionmaker(isolated, class_=AsyncSession, expire_on_commit=False)
    finally:
        await isolated.dispose()


async def init_db() -> None:
    """Create all tables (local development and tests)."""
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
