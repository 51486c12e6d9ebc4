"""
Shared pytest fixtures for the database, sessions, and settings.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from socialfeed.config import DatabaseSettings, Settings
from socialfeed.db import Database

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def database() -> AsyncIterator[Database]:
    """Provide a fresh in-memory SQLite store with the schema created."""

    db = Database(DatabaseSettings(url=SQLITE_MEMORY_URL))
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncIterator[AsyncSession]:
    """Create an AsyncSession per test, rolled back afterwards."""

    async with database.session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def persist(db_session: AsyncSession) -> Callable[..., Awaitable[None]]:
    """
    Flush factory-built objects and detach everything from the session.

    Later queries then load rows from the database instead of returning the
    in-memory objects, so relationship ordering and projections are real.
    """

    async def _persist(*objects: Any) -> None:
        db_session.add_all(objects)
        await db_session.flush()
        db_session.expunge_all()

    return _persist


@pytest.fixture
def settings_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> Settings:
    """Override global settings with test-friendly configuration."""

    from socialfeed import config as config_module

    base_settings = config_module.Settings()
    database = base_settings.database.model_copy(
        update={"url": f"sqlite+aiosqlite:///{tmp_path / 'feed.db'}", "echo": False}
    )
    logging_conf = base_settings.logging.model_copy(update={"directory": tmp_path / "logs"})
    overrides = base_settings.model_copy(update={"database": database, "logging": logging_conf})
    monkeypatch.setattr(config_module, "get_settings", lambda: overrides)
    return overrides
