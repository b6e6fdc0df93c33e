"""Tests for the profile store."""
from __future__ import annotations

from socialgraph.services import search_users


def test_search_matches_case_insensitively(db, user_factory):
    alice = user_factory("alice")
    user_factory("bob", display_name="Bob Stone")
    user_factory("carol", display_name="Carol Field")

    found = search_users(db, query="STONE", viewer_id=alice.id, limit=10)

    assert [user.username for user in found] == ["bob"]


def test_search_treats_wildcards_literally(db, user_factory):
    alice = user_factory("alice")
    user_factory("bob")
    user_factory("dash_board", display_name="100% Dash")

    assert [user.username for user in search_users(db, query="%", viewer_id=alice.id, limit=10)] == ["dash_board"]
    assert [user.username for user in search_users(db, query="_", viewer_id=alice.id, limit=10)] == ["dash_board"]
    assert search_users(db, query="b%b", viewer_id=alice.id, limit=10) == []
