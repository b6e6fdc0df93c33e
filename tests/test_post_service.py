"""Tests for the post store."""
from __future__ import annotations

import uuid

import pytest

from socialgraph.errors import InvalidContentError, NotOwnerError, PostNotFoundError, UnknownTargetError
from socialgraph.services import (
    accept_request,
    add_comment,
    create_post,
    delete_post,
    follow_user,
    list_recent,
    list_saved_posts,
    save_post,
    toggle_like,
    unfollow_user,
    unsave_post,
)
from socialgraph.services.post_service import like_counts


def test_create_post_strips_content(db, user_factory):
    alice = user_factory("alice")

    post = create_post(db, author_id=alice.id, content="  hello  ", sentiment="happy")

    assert post.content == "hello"
    assert post.sentiment == "happy"
    assert post.image_url is None


def test_create_post_rejects_blank_content(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(InvalidContentError):
        create_post(db, author_id=alice.id, content="   ")


def test_only_author_can_delete(db, user_factory, post_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    post = post_factory(alice, "mine")

    with pytest.raises(NotOwnerError):
        delete_post(db, post_id=post.id, author_id=bob.id)

    delete_post(db, post_id=post.id, author_id=alice.id)
    assert list_recent(db, 10) == []
    with pytest.raises(PostNotFoundError):
        delete_post(db, post_id=post.id, author_id=alice.id)


def test_toggle_like_flips_state(db, user_factory, post_factory):
    alice = user_factory("alice")
    post = post_factory(alice, "like me")

    assert toggle_like(db, post_id=post.id, user_id=alice.id) is True
    assert like_counts(db, [post.id]) == {post.id: 1}
    assert toggle_like(db, post_id=post.id, user_id=alice.id) is False
    assert like_counts(db, [post.id]) == {}


def test_toggle_like_unknown_post(db, user_factory):
    alice = user_factory("alice")
    with pytest.raises(PostNotFoundError):
        toggle_like(db, post_id=uuid.uuid4(), user_id=alice.id)


def test_saved_posts_are_idempotent(db, user_factory, post_factory):
    alice = user_factory("alice")
    post = post_factory(alice, "keep this")

    first = save_post(db, user_id=alice.id, post_id=post.id)
    second = save_post(db, user_id=alice.id, post_id=post.id)

    assert first.id == second.id
    assert [saved.id for saved in list_saved_posts(db, user_id=alice.id)] == [post.id]
    assert unsave_post(db, user_id=alice.id, post_id=post.id) is True
    assert unsave_post(db, user_id=alice.id, post_id=post.id) is False
    assert list_saved_posts(db, user_id=alice.id) == []


def test_list_recent_filters_authors(db, user_factory, post_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    post_factory(alice, "a")
    post_factory(bob, "b")

    assert [post.author_id for post in list_recent(db, 10, author_ids={bob.id})] == [bob.id]
    assert list_recent(db, 10, author_ids=set()) == []


def test_saved_posts_hide_unfriended_authors(db, user_factory, post_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    post = post_factory(bob, "bookmark me")
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    accept_request(db, accepter_id=bob.id, requester_id=alice.id)

    save_post(db, user_id=alice.id, post_id=post.id)
    assert [saved.id for saved in list_saved_posts(db, user_id=alice.id)] == [post.id]

    unfollow_user(db, actor_id=alice.id, target_id=bob.id)
    assert list_saved_posts(db, user_id=alice.id) == []


def test_comment_from_unknown_author(db, user_factory, post_factory):
    alice = user_factory("alice")
    post = post_factory(alice, "talk to me")
    ghost_id = uuid.uuid4()

    with pytest.raises(UnknownTargetError) as excinfo:
        add_comment(db, post_id=post.id, author_id=ghost_id, content="boo")
    assert excinfo.value.user_id == ghost_id
