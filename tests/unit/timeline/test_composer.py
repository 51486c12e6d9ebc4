"""
Unit tests for timeline and global feed composition.

These run against transient ORM objects built by the factories; no database
is involved.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from socialfeed.schemas import TimelineEntry
from socialfeed.timeline import (
    compose_user_timeline,
    entry_from_post,
    entry_from_retweet,
    expand_posts_with_retweets,
    order_entries,
)
from tests.factories import PostFactory, RetweetFactory, UserFactory

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


def t(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture
def alice():
    return UserFactory.build(name="Alice")


@pytest.fixture
def bob():
    return UserFactory.build(name="Bob")


@pytest.fixture
def amy():
    return UserFactory.build(name="Amy")


class TestComposeUserTimeline:
    """Merging a user's own posts with their retweets."""

    def test_empty_inputs_give_empty_timeline(self) -> None:
        assert compose_user_timeline([], []) == []

    def test_posts_only(self, alice) -> None:
        posts = [PostFactory.build(author=alice, created_at=t(i)) for i in range(3)]

        timeline = compose_user_timeline(posts, [])

        assert [entry.id for entry in timeline] == [posts[2].id, posts[1].id, posts[0].id]
        assert all(not entry.retweeted for entry in timeline)
        assert all(entry.retweeted_by is None for entry in timeline)

    def test_retweets_only(self, alice, bob) -> None:
        retweets = [
            RetweetFactory.build(user=alice, post=PostFactory.build(author=bob), created_at=t(i))
            for i in range(3)
        ]

        timeline = compose_user_timeline([], retweets)

        assert [entry.created_at for entry in timeline] == [t(2), t(1), t(0)]
        assert all(entry.retweeted for entry in timeline)

    def test_length_is_posts_plus_retweets(self, alice, bob) -> None:
        posts = [PostFactory.build(author=alice, created_at=t(i)) for i in range(4)]
        retweets = [
            RetweetFactory.build(user=alice, post=PostFactory.build(author=bob), created_at=t(i))
            for i in range(3)
        ]

        timeline = compose_user_timeline(posts, retweets)

        assert len(timeline) == len(posts) + len(retweets)

    def test_retweeted_flag_marks_retweet_origin(self, alice, bob) -> None:
        own = PostFactory.build(author=alice, created_at=t(0))
        retweet = RetweetFactory.build(
            user=alice, post=PostFactory.build(author=bob), created_at=t(1)
        )

        timeline = compose_user_timeline([own], [retweet])

        flags = {(entry.id, entry.retweeted) for entry in timeline}
        assert flags == {(retweet.post.id, True), (own.id, False)}

    def test_retweets_are_newest_first(self, alice, bob) -> None:
        older = RetweetFactory.build(
            user=alice, post=PostFactory.build(author=bob, created_at=t(50)), created_at=t(5)
        )
        newer = RetweetFactory.build(
            user=alice, post=PostFactory.build(author=bob, created_at=t(0)), created_at=t(10)
        )

        timeline = compose_user_timeline([], [older, newer])

        # Ordered by retweet time, not by the original post time
        assert [entry.id for entry in timeline] == [newer.post.id, older.post.id]

    def test_retweet_precedes_later_post(self, alice, bob) -> None:
        own = PostFactory.build(author=alice, created_at=t(100))
        retweet = RetweetFactory.build(
            user=alice, post=PostFactory.build(author=bob), created_at=t(1)
        )

        timeline = compose_user_timeline([own], [retweet])

        assert [entry.retweeted for entry in timeline] == [True, False]

    def test_example_retweet_newer_than_post(self, alice, bob) -> None:
        post_1 = PostFactory.build(id=1, author=alice, created_at=t(1))
        post_2 = PostFactory.build(id=2, author=bob, created_at=t(2))
        retweet = RetweetFactory.build(user=alice, post=post_2, created_at=t(3))

        timeline = compose_user_timeline([post_1], [retweet])

        assert [(e.id, e.created_at, e.retweeted, e.retweeted_by) for e in timeline] == [
            (2, t(3), True, "Bob"),
            (1, t(1), False, None),
        ]

    def test_example_retweet_outranks_newer_post(self, alice, amy) -> None:
        post_1 = PostFactory.build(id=1, author=alice, created_at=t(5))
        post_2 = PostFactory.build(id=2, author=amy, created_at=t(0))
        retweet = RetweetFactory.build(user=alice, post=post_2, created_at=t(1))

        timeline = compose_user_timeline([post_1], [retweet])

        assert [(e.id, e.retweeted) for e in timeline] == [(2, True), (1, False)]

    def test_retweet_entry_uses_retweet_time_and_post_fields(self, alice, bob) -> None:
        original = PostFactory.build(author=bob, content="hello", created_at=t(0))
        retweet = RetweetFactory.build(user=alice, post=original, created_at=t(30))

        entry = entry_from_retweet(retweet)

        assert entry.id == original.id
        assert entry.content == "hello"
        assert entry.user_id == bob.id
        assert entry.user.name == "Bob"
        assert entry.created_at == t(30)
        assert entry.updated_at == original.updated_at
        assert entry.retweeted_by == "Bob"

    def test_own_post_retweeted_by_self_appears_twice(self, alice) -> None:
        own = PostFactory.build(author=alice, created_at=t(0))
        retweet = RetweetFactory.build(user=alice, post=own, created_at=t(20))

        timeline = compose_user_timeline([own], [retweet])

        assert [entry.id for entry in timeline] == [own.id, own.id]
        assert [entry.created_at for entry in timeline] == [t(20), t(0)]
        assert [entry.retweeted for entry in timeline] == [True, False]

    def test_entries_never_expose_password(self, alice) -> None:
        timeline = compose_user_timeline([PostFactory.build(author=alice)], [])

        dumped = timeline[0].model_dump()
        assert "password" not in dumped["user"]


class TestOrderEntries:
    """The shared ordering policy."""

    def test_equal_timestamps_keep_input_order(self, alice) -> None:
        posts = [PostFactory.build(author=alice, created_at=t(0)) for _ in range(4)]
        entries = [entry_from_post(post) for post in posts]

        ordered = order_entries(entries)

        assert [entry.id for entry in ordered] == [post.id for post in posts]

    def test_does_not_mutate_input(self, alice) -> None:
        posts = [PostFactory.build(author=alice, created_at=t(i)) for i in range(3)]
        entries = [entry_from_post(post) for post in posts]
        snapshot = list(entries)

        order_entries(entries)

        assert entries == snapshot

    def test_accepts_generators(self, alice) -> None:
        posts = [PostFactory.build(author=alice, created_at=t(i)) for i in range(2)]

        ordered = order_entries(entry_from_post(post) for post in posts)

        assert [entry.created_at for entry in ordered] == [t(1), t(0)]

    def test_groups_are_each_newest_first(self, alice) -> None:
        entries = [
            entry_from_post(PostFactory.build(author=alice, created_at=t(9))),
            entry_from_post(PostFactory.build(author=alice, created_at=t(1))).model_copy(
                update={"retweeted": True}
            ),
            entry_from_post(PostFactory.build(author=alice, created_at=t(7))),
            entry_from_post(PostFactory.build(author=alice, created_at=t(3))).model_copy(
                update={"retweeted": True}
            ),
        ]

        ordered = order_entries(entries)

        assert [(e.retweeted, e.created_at) for e in ordered] == [
            (True, t(3)),
            (True, t(1)),
            (False, t(9)),
            (False, t(7)),
        ]


class TestExpandPostsWithRetweets:
    """The global feed expansion."""

    def test_post_without_retweets_yields_single_entry(self, alice) -> None:
        post = PostFactory.build(author=alice, created_at=t(0))

        feed = expand_posts_with_retweets([post])

        assert len(feed) == 1
        assert isinstance(feed[0], TimelineEntry)
        assert feed[0].retweeted is False

    def test_post_expands_once_per_retweet_plus_original(self, alice, bob, amy) -> None:
        post = PostFactory.build(author=alice, created_at=t(0))
        RetweetFactory.build(user=bob, post=post, created_at=t(10))
        RetweetFactory.build(user=amy, post=post, created_at=t(20))

        feed = expand_posts_with_retweets([post])

        assert len(feed) == 3
        assert all(entry.id == post.id for entry in feed)
        assert [(e.retweeted, e.retweeted_by, e.user_id, e.created_at) for e in feed] == [
            (True, "Amy", amy.id, t(20)),
            (True, "Bob", bob.id, t(10)),
            (False, None, alice.id, t(0)),
        ]

    def test_retweet_copies_keep_original_author_profile(self, alice, bob) -> None:
        post = PostFactory.build(author=alice, created_at=t(0))
        RetweetFactory.build(user=bob, post=post, created_at=t(10))

        copy = expand_posts_with_retweets([post])[0]

        assert copy.user.id == alice.id

    def test_retweets_rank_above_newer_posts(self, alice, bob) -> None:
        old_post = PostFactory.build(author=alice, created_at=t(0))
        RetweetFactory.build(user=bob, post=old_post, created_at=t(1))
        new_post = PostFactory.build(author=bob, created_at=t(60))

        feed = expand_posts_with_retweets([new_post, old_post])

        assert [(e.id, e.retweeted) for e in feed] == [
            (old_post.id, True),
            (new_post.id, False),
            (old_post.id, False),
        ]

    def test_empty_feed(self) -> None:
        assert expand_posts_with_retweets([]) == []
