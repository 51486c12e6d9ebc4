"""
Async engine and session management.

A ``Database`` is created once by the caller and handed to whatever needs
store access; nothing in the package keeps a module-level engine.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import DatabaseSettings
from .models import Base

LOGGER = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine from database settings."""
    url = make_url(settings.url)
    kwargs: dict[str, Any] = {"echo": settings.echo}
    if url.get_backend_name() != "sqlite":
        kwargs["pool_size"] = settings.pool_size

    engine = create_async_engine(url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Owns the engine and session factory for one store."""

    def __init__(self, settings: DatabaseSettings, *, engine: AsyncEngine | None = None) -> None:
        self._settings = settings
        self._engine = engine or build_engine(settings)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional database session.

        The session is committed on success and rolled back on exception.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table known to the ORM metadata."""
        LOGGER.info("Creating database schema on %s", self._engine.url.render_as_string())
        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def check_health(self) -> tuple[bool, float]:
        """Check database connectivity and return (healthy, latency_ms)."""
        start = time.perf_counter()
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            latency = (time.perf_counter() - start) * 1000
            return True, latency
        except Exception as exc:
            LOGGER.error("Database health check failed: %s", exc)
            latency = (time.perf_counter() - start) * 1000
            return False, latency

    async def dispose(self) -> None:
        LOGGER.info("Disposing database engine")
        await self._engine.dispose()


__all__ = ["Database", "build_engine"]
