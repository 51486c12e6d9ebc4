"""
Base repository class with shared utilities.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """
    Base class for all repositories.

    Repositories never commit; the owner of the session decides the
    transaction boundary (see ``Database.session``).
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Expose the underlying session for transaction management."""
        return self._session


__all__ = ["BaseRepository"]
