"""
SQLAlchemy ORM models for users, posts, retweets, and likes.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base that enables async-friendly ORM operations."""

    pass


class TimestampMixin:
    """Reusable timestamp columns for auditing."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
        server_default=func.now(),
    )


class User(TimestampMixin, Base):
    """Account that authors posts and retweets other users' posts."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    # Credential hash; read paths must go through db.projections
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    image_name: Mapped[str] = mapped_column(String(1024), nullable=False)

    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="author",
        order_by="Post.created_at.desc()",
        cascade="all",
        passive_deletes=True,
    )
    retweets: Mapped[list[Retweet]] = relationship(
        "Retweet",
        back_populates="user",
        order_by="Retweet.created_at.desc()",
        cascade="all",
        passive_deletes=True,
    )
    likes: Mapped[list[Like]] = relationship(
        "Like",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)


class Post(TimestampMixin, Base):
    """Content item authored by a single user."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    author: Mapped[User] = relationship("User", back_populates="posts")
    retweets: Mapped[list[Retweet]] = relationship(
        "Retweet",
        back_populates="post",
        order_by="Retweet.created_at.desc()",
        cascade="all",
        passive_deletes=True,
    )
    likes: Mapped[list[Like]] = relationship(
        "Like",
        back_populates="post",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_posts_user_id", "user_id"),
        # Listings are always newest first
        Index("ix_posts_created_at", "created_at"),
    )


class Retweet(TimestampMixin, Base):
    """A user's re-share of a post, timestamped independently of the post."""

    __tablename__ = "retweets"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )

    user: Mapped[User] = relationship("User", back_populates="retweets")
    post: Mapped[Post] = relationship("Post", back_populates="retweets")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_retweets_user_post"),
        Index("ix_retweets_user_created", "user_id", "created_at"),
        Index("ix_retweets_post_id", "post_id"),
    )


class Like(Base):
    """Association capturing which posts a user has liked."""

    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        server_default=func.now(),
    )

    user: Mapped[User] = relationship("User", back_populates="likes")
    post: Mapped[Post] = relationship("Post", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        Index("ix_likes_user_post", "user_id", "post_id"),
    )


__all__ = ["Base", "IdType", "Like", "Post", "Retweet", "TimestampMixin", "User"]
