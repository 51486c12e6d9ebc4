"""
Timeline composition for user timelines and the global feed.
"""

from .composer import (
    compose_user_timeline,
    entry_from_post,
    entry_from_retweet,
    expand_posts_with_retweets,
    order_entries,
)

__all__ = [
    "compose_user_timeline",
    "entry_from_post",
    "entry_from_retweet",
    "expand_posts_with_retweets",
    "order_entries",
]
