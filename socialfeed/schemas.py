"""
Pydantic schemas for the values returned by the data-access layer.

Schemas read attributes from ORM objects, so only the fields declared here
ever leave a repository. ``UserPublic`` deliberately has no password field.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# -----------------------------------------------------------------------------
# User Schemas
# -----------------------------------------------------------------------------


class UserPublic(BaseModel):
    """User record without credentials."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique user identifier.")
    name: str = Field(..., description="Display name.")
    email: str = Field(..., description="Login e-mail address.")
    image_name: str = Field(..., description="Profile image reference.")
    created_at: datetime = Field(..., description="Record creation timestamp.")
    updated_at: datetime = Field(..., description="Record last update timestamp.")


# -----------------------------------------------------------------------------
# Post Schemas
# -----------------------------------------------------------------------------


class PostWithAuthor(BaseModel):
    """Post together with its author's public profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique post identifier.")
    content: str = Field(..., description="Post body.")
    user_id: int = Field(..., description="Author identifier.")
    created_at: datetime = Field(..., description="Record creation timestamp.")
    updated_at: datetime = Field(..., description="Record last update timestamp.")
    user: UserPublic = Field(..., validation_alias="author", description="Post author.")


class TimelineEntry(PostWithAuthor):
    """
    One row of a composed timeline or feed.

    ``created_at`` is the effective timestamp: the retweet time when
    ``retweeted`` is true, the post's own creation time otherwise.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    retweeted: bool = Field(default=False, description="Entry originates from a retweet.")
    retweeted_by: str | None = Field(
        default=None, description="Display name attached to a retweeted entry."
    )


# -----------------------------------------------------------------------------
# Composite Views
# -----------------------------------------------------------------------------


class UserWithPosts(UserPublic):
    """User profile with the posts they authored, newest first."""

    posts: list[PostWithAuthor] = Field(default_factory=list)


class LikedPost(BaseModel):
    """Wrapper mirroring the like association."""

    model_config = ConfigDict(from_attributes=True)

    post: PostWithAuthor


class UserWithLikedPosts(UserPublic):
    """User profile with the posts they liked, ordered by post creation time."""

    likes: list[LikedPost] = Field(default_factory=list)


class UserTimeline(UserPublic):
    """User profile with their composed timeline of posts and retweets."""

    posts: list[TimelineEntry] = Field(default_factory=list)


__all__ = [
    "LikedPost",
    "PostWithAuthor",
    "TimelineEntry",
    "UserPublic",
    "UserTimeline",
    "UserWithLikedPosts",
    "UserWithPosts",
]
