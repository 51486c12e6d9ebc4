"""
Post repository for data access operations on Post entities.

Write operations return the ORM row and let SQLAlchemy errors propagate:
``IntegrityError`` for constraint violations and ``NoResultFound`` when the
target post does not exist. Read operations return schemas built through the
public user projection.
"""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from ...schemas import PostWithAuthor, TimelineEntry
from ...timeline import expand_posts_with_retweets
from ..models import Post
from ..projections import post_author, retweet_user
from .base import BaseRepository


class PostRepository(BaseRepository):
    """Data access helpers for Post entities."""

    async def create(self, content: str, user_id: int) -> Post:
        """Insert a new post authored by ``user_id``."""
        post = Post(content=content, user_id=user_id)
        self._session.add(post)
        await self._session.flush()
        await self._session.refresh(post)
        return post

    async def update(self, post_id: int, content: str) -> Post:
        """Replace the content of an existing post."""
        post = await self._session.get_one(Post, post_id)
        post.content = content
        await self._session.flush()
        await self._session.refresh(post)
        return post

    async def delete(self, post_id: int) -> Post:
        """
        Delete a post by ID and return the removed row.

        Retweets and likes of the post are removed by the database cascade.
        """
        post = await self._session.get_one(Post, post_id)
        await self._session.delete(post)
        await self._session.flush()
        return post

    async def get(self, post_id: int) -> PostWithAuthor | None:
        """Fetch a post with its author, or None if it does not exist."""
        stmt: Select[tuple[Post]] = (
            select(Post).where(Post.id == post_id).options(post_author())
        )
        post = await self._session.scalar(stmt)
        if post is None:
            return None
        return PostWithAuthor.model_validate(post)

    async def get_all(self) -> list[PostWithAuthor]:
        """Return every post with its author, newest first."""
        stmt: Select[tuple[Post]] = (
            select(Post).options(post_author()).order_by(Post.created_at.desc())
        )
        result = await self._session.scalars(stmt)
        return [PostWithAuthor.model_validate(post) for post in result]

    async def get_all_with_retweets(self) -> list[TimelineEntry]:
        """
        Return the global feed: every post plus one entry per retweet.

        Uses two selectin round-trips on top of the post query: one for
        authors and one for retweets with their retweeting users.
        """
        stmt: Select[tuple[Post]] = (
            select(Post)
            .options(
                post_author(),
                selectinload(Post.retweets).options(retweet_user()),
            )
            .order_by(Post.created_at.desc())
        )
        result = await self._session.scalars(stmt)
        return expand_posts_with_retweets(list(result))


__all__ = ["PostRepository"]
