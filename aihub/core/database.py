"""
Database connection and session management.

A single ``Database`` is built from a ``DatabaseConfig`` when the application
starts, kept on ``app.state.database`` for the life of the process and
disposed at shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from aihub.core.config import DatabaseConfig


class Database:
    """Async engine plus the session factory bound to it."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables (development and tests only)."""
        # Populate metadata before creating.
        import aihub.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self):
        """Transactional session scope: commit on success, roll back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


def create_database(config: DatabaseConfig) -> Database:
    """Build the process-wide database from resolved configuration."""
    engine = create_async_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_pre_ping=True,
        connect_args=config.connect_args,
    )
    return Database(engine)


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_database(request).session() as session:
        yield session
