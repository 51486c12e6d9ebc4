"""
Database toolkit exposing ORM models, the store handle, and repositories.
"""

from .models import Base, Like, Post, Retweet, User
from .repositories import BaseRepository, PostRepository, UserRepository
from .session import Database, build_engine

__all__ = [
    "Base",
    "BaseRepository",
    "Database",
    "Like",
    "Post",
    "PostRepository",
    "Retweet",
    "User",
    "UserRepository",
    "build_engine",
]
