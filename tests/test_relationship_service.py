"""Tests for the friend-request state machine."""
from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from socialgraph.errors import (
    DuplicateRequestError,
    NoSuchRequestError,
    SelfRelationshipError,
    StoreUnavailableError,
    UnknownTargetError,
)
from socialgraph.models import Relationship, RelationshipStatus
from socialgraph.services import relationship_service
from socialgraph.services import (
    EdgeDirection,
    accept_request,
    follow_user,
    get_follow_stats,
    list_accepted,
    list_pending,
    outgoing_statuses,
    reject_request,
    repair_mutual_edges,
    status_between,
    suggestions,
    unfollow_user,
)


def _edge_count(db, follower_id, following_id) -> int:
    return db.scalar(
        select(func.count())
        .select_from(Relationship)
        .where(Relationship.follower_id == follower_id, Relationship.following_id == following_id)
    )


@pytest.fixture
def alice(user_factory):
    return user_factory("alice")


@pytest.fixture
def bob(user_factory):
    return user_factory("bob")


@pytest.fixture
def friends(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    accept_request(db, accepter_id=bob.id, requester_id=alice.id)
    return alice, bob


def test_follow_creates_pending_request(db, alice, bob):
    edge = follow_user(db, requester_id=alice.id, target_id=bob.id)

    assert edge.status == RelationshipStatus.PENDING
    assert status_between(db, alice.id, bob.id) == RelationshipStatus.PENDING
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE
    assert list_pending(db, bob.id) == [alice.id]
    assert list_pending(db, alice.id, EdgeDirection.OUTGOING) == [bob.id]


def test_follow_self_is_rejected(db, alice):
    with pytest.raises(SelfRelationshipError):
        follow_user(db, requester_id=alice.id, target_id=alice.id)
    assert _edge_count(db, alice.id, alice.id) == 0


def test_follow_unknown_target(db, alice):
    with pytest.raises(UnknownTargetError):
        follow_user(db, requester_id=alice.id, target_id=uuid.uuid4())


def test_follow_twice_keeps_single_edge(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)

    with pytest.raises(DuplicateRequestError):
        follow_user(db, requester_id=alice.id, target_id=bob.id)
    assert _edge_count(db, alice.id, bob.id) == 1


def test_follow_existing_friend_is_duplicate(db, friends):
    alice, bob = friends
    with pytest.raises(DuplicateRequestError):
        follow_user(db, requester_id=alice.id, target_id=bob.id)
    with pytest.raises(DuplicateRequestError):
        follow_user(db, requester_id=bob.id, target_id=alice.id)


def test_accept_makes_friendship_mutual(db, friends):
    alice, bob = friends

    assert status_between(db, alice.id, bob.id) == RelationshipStatus.ACCEPTED
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.ACCEPTED
    assert list_accepted(db, alice.id, EdgeDirection.OUTGOING) == [bob.id]
    assert list_accepted(db, bob.id, EdgeDirection.OUTGOING) == [alice.id]
    assert list_accepted(db, alice.id, EdgeDirection.INCOMING) == [bob.id]
    assert list_pending(db, bob.id) == []


def test_accept_without_request_fails(db, alice, bob):
    with pytest.raises(NoSuchRequestError):
        accept_request(db, accepter_id=bob.id, requester_id=alice.id)
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE


def test_accept_is_not_repeatable(db, friends):
    alice, bob = friends
    with pytest.raises(NoSuchRequestError):
        accept_request(db, accepter_id=bob.id, requester_id=alice.id)


def test_requester_cannot_accept_own_request(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    with pytest.raises(NoSuchRequestError):
        accept_request(db, accepter_id=alice.id, requester_id=bob.id)


def test_accept_promotes_crossed_requests(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    follow_user(db, requester_id=bob.id, target_id=alice.id)

    accept_request(db, accepter_id=bob.id, requester_id=alice.id)

    assert status_between(db, alice.id, bob.id) == RelationshipStatus.ACCEPTED
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.ACCEPTED
    assert _edge_count(db, alice.id, bob.id) == 1
    assert _edge_count(db, bob.id, alice.id) == 1


def test_reject_removes_request_and_is_idempotent(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)

    assert reject_request(db, rejecter_id=bob.id, requester_id=alice.id) is True
    assert reject_request(db, rejecter_id=bob.id, requester_id=alice.id) is False
    assert status_between(db, alice.id, bob.id) == RelationshipStatus.NONE
    assert list_pending(db, bob.id) == []


def test_reject_leaves_friendship_alone(db, friends):
    alice, bob = friends
    assert reject_request(db, rejecter_id=bob.id, requester_id=alice.id) is False
    assert status_between(db, alice.id, bob.id) == RelationshipStatus.ACCEPTED


def test_rejected_user_may_ask_again(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    reject_request(db, rejecter_id=bob.id, requester_id=alice.id)

    edge = follow_user(db, requester_id=alice.id, target_id=bob.id)
    assert edge.status == RelationshipStatus.PENDING


@pytest.mark.parametrize("actor", ["alice", "bob"])
def test_unfollow_dissolves_friendship_both_ways(db, friends, actor):
    alice, bob = friends
    actor_user, other = (alice, bob) if actor == "alice" else (bob, alice)

    assert unfollow_user(db, actor_id=actor_user.id, target_id=other.id) is True

    assert status_between(db, alice.id, bob.id) == RelationshipStatus.NONE
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE
    assert list_accepted(db, alice.id) == []
    assert list_accepted(db, bob.id) == []


def test_unfollow_cancels_outgoing_request_only(db, alice, bob, user_factory):
    carol = user_factory("carol")
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    follow_user(db, requester_id=carol.id, target_id=alice.id)

    assert unfollow_user(db, actor_id=alice.id, target_id=bob.id) is True
    assert unfollow_user(db, actor_id=alice.id, target_id=carol.id) is False

    assert status_between(db, alice.id, bob.id) == RelationshipStatus.NONE
    assert list_pending(db, alice.id) == [carol.id]


def test_unfollow_without_edge_is_noop(db, alice, bob):
    assert unfollow_user(db, actor_id=alice.id, target_id=bob.id) is False
    assert unfollow_user(db, actor_id=alice.id, target_id=alice.id) is False


def test_suggestions_exclude_self_and_connections(db, alice, bob, user_factory):
    carol = user_factory("carol")
    dave = user_factory("dave")
    erin = user_factory("erin")
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    follow_user(db, requester_id=carol.id, target_id=alice.id)
    follow_user(db, requester_id=alice.id, target_id=dave.id)
    accept_request(db, accepter_id=dave.id, requester_id=alice.id)

    assert suggestions(db, alice.id, 10) == [erin.id]
    assert set(suggestions(db, erin.id, 10)) == {alice.id, bob.id, carol.id, dave.id}
    assert len(suggestions(db, erin.id, 2)) == 2
    assert suggestions(db, erin.id, 0) == []


def test_outgoing_statuses(db, alice, bob, user_factory):
    carol = user_factory("carol")
    follow_user(db, requester_id=alice.id, target_id=bob.id)

    statuses = outgoing_statuses(db, alice.id, [bob.id, carol.id])

    assert statuses == {bob.id: RelationshipStatus.PENDING, carol.id: RelationshipStatus.NONE}


def test_repair_restores_missing_reverse_edge(db, alice, bob):
    db.add(Relationship(follower_id=alice.id, following_id=bob.id, status="accepted"))
    db.commit()
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE

    assert repair_mutual_edges(db, bob.id) == 1
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.ACCEPTED
    assert repair_mutual_edges(db, alice.id) == 0


def test_repair_ignores_pending_requests(db, alice, bob):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    assert repair_mutual_edges(db, alice.id) == 0
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE


def test_follow_stats_count_accepted_edges_only(db, friends, user_factory):
    alice, bob = friends
    carol = user_factory("carol")
    follow_user(db, requester_id=carol.id, target_id=alice.id)

    stats = get_follow_stats(db, user_id=alice.id, viewer_id=carol.id)

    assert stats.followers_count == 1
    assert stats.following_count == 1
    assert stats.viewer_status == RelationshipStatus.PENDING


def test_read_failures_propagate(db, alice, monkeypatch):
    def _boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    monkeypatch.setattr(db, "scalar", _boom)
    monkeypatch.setattr(db, "scalars", _boom)

    with pytest.raises(StoreUnavailableError):
        status_between(db, alice.id, uuid.uuid4())
    with pytest.raises(StoreUnavailableError):
        list_accepted(db, alice.id)
    with pytest.raises(StoreUnavailableError):
        suggestions(db, alice.id, 5)


def test_follow_race_maps_to_duplicate(db, alice, bob, monkeypatch):
    follow_user(db, requester_id=alice.id, target_id=bob.id)
    db.expunge_all()

    real_get_edge = relationship_service._get_edge
    calls = []

    def _stale_then_real(*args):
        calls.append(args)
        if len(calls) == 1:
            return None
        return real_get_edge(*args)

    monkeypatch.setattr(relationship_service, "_get_edge", _stale_then_real)

    with pytest.raises(DuplicateRequestError):
        follow_user(db, requester_id=alice.id, target_id=bob.id)
    assert _edge_count(db, alice.id, bob.id) == 1


def test_follow_from_unknown_requester_names_requester(db, bob):
    ghost_id = uuid.uuid4()
    with pytest.raises(UnknownTargetError) as excinfo:
        follow_user(db, requester_id=ghost_id, target_id=bob.id)
    assert excinfo.value.user_id == ghost_id
    assert _edge_count(db, ghost_id, bob.id) == 0


def test_failed_accept_rolls_back_both_edges(db, alice, bob, monkeypatch):
    follow_user(db, requester_id=alice.id, target_id=bob.id)

    def _boom(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is gone"))

    monkeypatch.setattr(relationship_service, "_upsert_accepted", _boom)

    with pytest.raises(StoreUnavailableError):
        accept_request(db, accepter_id=bob.id, requester_id=alice.id)

    assert status_between(db, alice.id, bob.id) == RelationshipStatus.PENDING
    assert status_between(db, bob.id, alice.id) == RelationshipStatus.NONE
