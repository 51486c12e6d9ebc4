"""
Command-line entry points for the social feed data layer.

Usage:
    # Create all tables (use Alembic for managed deployments)
    python main.py init-db

    # Print a user's timeline (own posts and retweets) as JSON
    python main.py timeline 42

    # Print the global feed, every post expanded per retweet
    python main.py feed

    # Check database connectivity
    python main.py health
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from pydantic import BaseModel

from socialfeed.config import Settings, get_settings
from socialfeed.db import Database, PostRepository, UserRepository
from socialfeed.logger import setup_logging

LOGGER = logging.getLogger(__name__)


def _dump(payload: BaseModel | Sequence[BaseModel]) -> str:
    if isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json")
    else:
        data = [item.model_dump(mode="json") for item in payload]
    return json.dumps(data, ensure_ascii=False, indent=2)


async def init_db(settings: Settings) -> int:
    """Create the schema directly from the ORM metadata."""
    database = Database(settings.database)
    try:
        await database.create_all()
    finally:
        await database.dispose()
    return 0


async def show_timeline(settings: Settings, user_id: int) -> int:
    """Print a user's composed timeline."""
    database = Database(settings.database)
    try:
        async with database.session() as session:
            timeline = await UserRepository(session, settings=settings.users).get_with_retweets(
                user_id
            )
    finally:
        await database.dispose()

    if timeline is None:
        print(f"Error: user {user_id} not found", file=sys.stderr)
        return 1

    LOGGER.info("Timeline for user %d has %d entries", user_id, len(timeline.posts))
    print(_dump(timeline))
    return 0


async def show_feed(settings: Settings) -> int:
    """Print the global feed."""
    database = Database(settings.database)
    try:
        async with database.session() as session:
            entries = await PostRepository(session).get_all_with_retweets()
    finally:
        await database.dispose()

    LOGGER.info("Global feed has %d entries", len(entries))
    print(_dump(entries))
    return 0


async def check_health(settings: Settings) -> int:
    """Report database connectivity."""
    database = Database(settings.database)
    try:
        healthy, latency = await database.check_health()
    finally:
        await database.dispose()

    print(f"database: {'ok' if healthy else 'unavailable'} ({latency:.1f} ms)")
    return 0 if healthy else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Social Feed Data Layer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    timeline_parser = subparsers.add_parser("timeline", help="Print a user's timeline")
    timeline_parser.add_argument("user_id", type=int, help="ID of the user")

    subparsers.add_parser("feed", help="Print the global feed")
    subparsers.add_parser("health", help="Check database connectivity")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point with subcommand routing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    setup_logging(settings)

    if args.command == "init-db":
        return asyncio.run(init_db(settings))
    elif args.command == "timeline":
        return asyncio.run(show_timeline(settings, args.user_id))
    elif args.command == "feed":
        return asyncio.run(show_feed(settings))
    elif args.command == "health":
        return asyncio.run(check_health(settings))
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
