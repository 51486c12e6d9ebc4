"""
User repository for data access operations on User entities.

Only ``get_by_email_with_password`` loads the credential column; every other
read goes through the allow-list in ``db.projections``.
"""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from ...config import UserSettings
from ...schemas import (
    LikedPost,
    UserPublic,
    UserTimeline,
    UserWithLikedPosts,
    UserWithPosts,
)
from ...timeline import compose_user_timeline
from ..models import Like, Post, User
from ..projections import post_author, public_user, retweet_post_author
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Data access helpers for User entities."""

    def __init__(self, session: AsyncSession, *, settings: UserSettings | None = None) -> None:
        super().__init__(session)
        self._settings = settings or UserSettings()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def create(self, name: str, email: str, password: str) -> User:
        """
        Insert a new user with the default profile image.

        ``password`` is stored as given; hashing belongs to the caller.
        A duplicate e-mail raises ``IntegrityError``.
        """
        user = User(
            name=name,
            email=email,
            password=password,
            image_name=self._settings.default_image_name,
        )
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def update_profile(
        self,
        user_id: int,
        *,
        name: str | None = None,
        email: str | None = None,
        image_name: str | None = None,
    ) -> User:
        """Update the given profile fields, leaving the others untouched."""
        user = await self._session.get_one(User, user_id)
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if image_name is not None:
            user.image_name = image_name
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def delete(self, user_id: int) -> User:
        """Delete a user; their posts, retweets and likes go with them."""
        user = await self._session.get_one(User, user_id)
        await self._session.delete(user)
        await self._session.flush()
        return user

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def get(self, user_id: int) -> UserPublic | None:
        stmt: Select[tuple[User]] = select(User).where(User.id == user_id).options(public_user())
        user = await self._session.scalar(stmt)
        return UserPublic.model_validate(user) if user is not None else None

    async def get_by_email(self, email: str) -> UserPublic | None:
        stmt: Select[tuple[User]] = select(User).where(User.email == email).options(public_user())
        user = await self._session.scalar(stmt)
        return UserPublic.model_validate(user) if user is not None else None

    async def get_by_email_with_password(self, email: str) -> User | None:
        """
        Fetch the full user row, credential included.

        Intended for the authentication flow only.
        """
        return await self._session.scalar(select(User).where(User.email == email))

    async def get_all(self) -> list[UserPublic]:
        """Return every user, newest first."""
        stmt: Select[tuple[User]] = (
            select(User).options(public_user()).order_by(User.created_at.desc())
        )
        result = await self._session.scalars(stmt)
        return [UserPublic.model_validate(user) for user in result]

    # -------------------------------------------------------------------------
    # Composite views
    # -------------------------------------------------------------------------

    async def get_with_posts(self, user_id: int) -> UserWithPosts | None:
        """Fetch a user with their own posts, newest first."""
        stmt: Select[tuple[User]] = (
            select(User)
            .where(User.id == user_id)
            .options(
                public_user(),
                selectinload(User.posts).options(post_author()),
            )
        )
        user = await self._session.scalar(stmt)
        if user is None:
            return None
        return UserWithPosts.model_validate(user)

    async def get_liked_posts(self, user_id: int) -> UserWithLikedPosts | None:
        """Fetch a user with the posts they liked, ordered by post creation time."""
        user = await self.get(user_id)
        if user is None:
            return None

        stmt: Select[tuple[Like]] = (
            select(Like)
            .join(Like.post)
            .where(Like.user_id == user_id)
            .options(contains_eager(Like.post).options(post_author()))
            .order_by(Post.created_at.desc())
        )
        result = await self._session.scalars(stmt)
        likes = [LikedPost.model_validate(like) for like in result]
        return UserWithLikedPosts(**user.model_dump(), likes=likes)

    async def get_with_retweets(self, user_id: int) -> UserTimeline | None:
        """
        Fetch a user with their timeline of own posts and retweets.

        Retweets and posts are loaded by separate selectin queries, so the
        timeline is not a single point-in-time snapshot.
        """
        stmt: Select[tuple[User]] = (
            select(User)
            .where(User.id == user_id)
            .options(
                public_user(),
                selectinload(User.retweets).options(retweet_post_author()),
                selectinload(User.posts).options(post_author()),
            )
        )
        user = await self._session.scalar(stmt)
        if user is None:
            return None

        timeline = compose_user_timeline(user.posts, user.retweets)
        return UserTimeline(**UserPublic.model_validate(user).model_dump(), posts=timeline)


__all__ = ["UserRepository"]
