"""
Allow-list projections that keep credentials out of read queries.

Every read path loads users through these options. Columns that are not
listed stay unloaded and raise on access instead of lazy-loading, so a new
sensitive column is hidden until someone opts it in here.
"""

from __future__ import annotations

from sqlalchemy.orm import load_only, selectinload

from .models import Post, Retweet, User

USER_PUBLIC_COLUMNS = (
    User.id,
    User.name,
    User.email,
    User.image_name,
    User.created_at,
    User.updated_at,
)


def public_user():
    """Loader option restricting a root ``User`` entity to public columns."""
    return load_only(*USER_PUBLIC_COLUMNS, raiseload=True)


def post_author():
    """Eager-load ``Post.author`` through the public projection."""
    return selectinload(Post.author).load_only(*USER_PUBLIC_COLUMNS, raiseload=True)


def retweet_post_author():
    """Eager-load ``Retweet.post`` and the original author (two levels)."""
    return (
        selectinload(Retweet.post)
        .selectinload(Post.author)
        .load_only(*USER_PUBLIC_COLUMNS, raiseload=True)
    )


def retweet_user():
    """Eager-load the retweeting user through the public projection."""
    return selectinload(Retweet.user).load_only(*USER_PUBLIC_COLUMNS, raiseload=True)


__all__ = [
    "USER_PUBLIC_COLUMNS",
    "post_author",
    "public_user",
    "retweet_post_author",
    "retweet_user",
]
