"""
Timeline and feed composition.

Both composers turn ORM rows (with their relationships already loaded) into
``TimelineEntry`` values and order them with the same policy:

- retweet-derived entries come before every other entry, regardless of
  timestamps;
- within each group, entries are newest first by effective ``created_at``;
- ties keep their input order.

The retweet-first rule is kept as-is pending product clarification, even
though a single descending sort looks like the original intent. Two open
points for product:

- user timeline: a retweet outranks a newer own post;
- global feed: the retweet copies rank first, whereas the previous feed
  ranked the retweeted originals (posts with at least one retweet) first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ..schemas import TimelineEntry, UserPublic

if TYPE_CHECKING:
    from ..db.models import Post, Retweet

LOGGER = logging.getLogger(__name__)


def _entry_from_post(post: Post, **overrides: object) -> TimelineEntry:
    fields: dict[str, object] = {
        "id": post.id,
        "content": post.content,
        "user_id": post.user_id,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "user": UserPublic.model_validate(post.author),
        "retweeted": False,
        "retweeted_by": None,
    }
    fields.update(overrides)
    return TimelineEntry(**fields)


def entry_from_retweet(retweet: Retweet) -> TimelineEntry:
    """Entry for a retweet in its retweeter's timeline, labelled with the original author."""
    return _entry_from_post(
        retweet.post,
        created_at=retweet.created_at,
        retweeted=True,
        retweeted_by=retweet.post.author.name,
    )


def entry_from_post(post: Post) -> TimelineEntry:
    """Entry for a post listed under its own author."""
    return _entry_from_post(post)


def order_entries(entries: Iterable[TimelineEntry]) -> list[TimelineEntry]:
    """Return ``entries`` retweets first, each group newest first (stable)."""
    ordered = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
    # Second stable pass moves retweets ahead without disturbing the time order
    ordered.sort(key=lambda entry: not entry.retweeted)
    return ordered


def compose_user_timeline(
    posts: Sequence[Post],
    retweets: Sequence[Retweet],
) -> list[TimelineEntry]:
    """
    Merge a user's own posts and their retweets into one timeline.

    Args:
        posts: Posts authored by the user, with ``author`` loaded.
        retweets: Retweets made by the user, with ``post`` and ``post.author``
            loaded.

    Returns:
        ``len(posts) + len(retweets)`` entries ordered by ``order_entries``.
    """
    entries = [entry_from_retweet(retweet) for retweet in retweets]
    entries.extend(entry_from_post(post) for post in posts)
    LOGGER.debug("Composing timeline from %d retweets and %d posts", len(retweets), len(posts))
    return order_entries(entries)


def expand_posts_with_retweets(posts: Sequence[Post]) -> list[TimelineEntry]:
    """
    Expand every post into one entry per retweet plus the original.

    Retweet copies are attributed to the retweeter (``user_id`` and
    ``retweeted_by``) and carry the retweet time. Posts need ``author``,
    ``retweets`` and ``retweets[*].user`` loaded.
    """
    entries: list[TimelineEntry] = []
    for post in posts:
        for retweet in post.retweets:
            entries.append(
                _entry_from_post(
                    post,
                    user_id=retweet.user_id,
                    created_at=retweet.created_at,
                    retweeted=True,
                    retweeted_by=retweet.user.name,
                )
            )
        entries.append(entry_from_post(post))
    LOGGER.debug("Expanded %d posts into %d feed entries", len(posts), len(entries))
    return order_entries(entries)


__all__ = [
    "compose_user_timeline",
    "entry_from_post",
    "entry_from_retweet",
    "expand_posts_with_retweets",
    "order_entries",
]
