"""Business logic for the directed relationship graph.

Every edge ``(follower_id, following_id)`` is either ``pending`` or
``accepted``; ``none`` is the absence of a row. Accepting a request is a two
edge write so that friendship is symmetric at rest.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from ..errors import (
    DuplicateRequestError,
    NoSuchRequestError,
    SelfRelationshipError,
    UnknownTargetError,
)
from ..models import Relationship, RelationshipStatus, User
from .store import store_errors

logger = logging.getLogger(__name__)

PENDING = RelationshipStatus.PENDING.value
ACCEPTED = RelationshipStatus.ACCEPTED.value


class EdgeDirection(StrEnum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    viewer_status: RelationshipStatus


def _edge_clause(follower_id: UUID, following_id: UUID):
    return and_(Relationship.follower_id == follower_id, Relationship.following_id == following_id)


def _get_edge(db: Session, follower_id: UUID, following_id: UUID) -> Relationship | None:
    stmt = (
        select(Relationship)
        .where(_edge_clause(follower_id, following_id))
        .execution_options(populate_existing=True)
    )
    return db.scalars(stmt).first()


def _require_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UnknownTargetError(user_id)
    return user


def _upsert_accepted(db: Session, follower_id: UUID, following_id: UUID) -> None:
    """Insert or promote ``(follower_id, following_id)`` to accepted.

    Runs inside the caller's transaction and is safe to repeat.
    """

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        edge = _get_edge(db, follower_id, following_id)
        if edge is None:
            db.add(Relationship(follower_id=follower_id, following_id=following_id, status=ACCEPTED))
        else:
            edge.status = ACCEPTED
        db.flush()
        return

    stmt = insert(Relationship).values(follower_id=follower_id, following_id=following_id, status=ACCEPTED)
    stmt = stmt.on_conflict_do_update(
        index_elements=["follower_id", "following_id"],
        set_={"status": ACCEPTED, "updated_at": func.now()},
    )
    db.execute(stmt)


def follow_user(db: Session, *, requester_id: UUID, target_id: UUID) -> Relationship:
    """Create a pending request from ``requester_id`` to ``target_id``."""

    if requester_id == target_id:
        raise SelfRelationshipError()

    with store_errors(db, "follow user"):
        _require_user(db, target_id)
        if _get_edge(db, requester_id, target_id) is not None:
            raise DuplicateRequestError(requester_id, target_id)

        edge = Relationship(follower_id=requester_id, following_id=target_id, status=PENDING)
        db.add(edge)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent insert, or a user row is missing.
            db.rollback()
            if _get_edge(db, requester_id, target_id) is not None:
                raise DuplicateRequestError(requester_id, target_id) from exc
            missing = requester_id if db.get(User, requester_id) is None else target_id
            raise UnknownTargetError(missing) from exc
        db.refresh(edge)

    logger.info("Relationship request %s -> %s created", requester_id, target_id)
    return edge


def unfollow_user(db: Session, *, actor_id: UUID, target_id: UUID) -> bool:
    """Dissolve the actor's connection to ``target_id``.

    Removes the actor's outgoing edge whatever its status, plus the reverse
    edge when it is accepted, so a friendship never survives one-sided. A
    pending request the target sent to the actor is left for the actor to
    reject. Returns ``False`` when nothing was removed.
    """

    if actor_id == target_id:
        return False

    with store_errors(db, "unfollow user"):
        stmt = delete(Relationship).where(
            or_(
                _edge_clause(actor_id, target_id),
                and_(_edge_clause(target_id, actor_id), Relationship.status == ACCEPTED),
            )
        )
        removed = db.execute(stmt).rowcount or 0
        db.commit()

    if removed:
        logger.info("Relationship %s -> %s dissolved (%d edges)", actor_id, target_id, removed)
    return removed > 0


def accept_request(db: Session, *, accepter_id: UUID, requester_id: UUID) -> Relationship:
    """Accept the pending request ``requester_id -> accepter_id``.

    The forward flip and the reverse upsert commit together; either both
    edges end up accepted or neither changes.
    """

    with store_errors(db, "accept friend request"):
        stmt = (
            update(Relationship)
            .where(_edge_clause(requester_id, accepter_id), Relationship.status == PENDING)
            .values(status=ACCEPTED, updated_at=func.now())
        )
        if not db.execute(stmt).rowcount:
            db.rollback()
            raise NoSuchRequestError(requester_id, accepter_id)

        _upsert_accepted(db, accepter_id, requester_id)
        db.commit()
        edge = _get_edge(db, requester_id, accepter_id)

    logger.info("Relationship request %s -> %s accepted", requester_id, accepter_id)
    return edge


def reject_request(db: Session, *, rejecter_id: UUID, requester_id: UUID) -> bool:
    """Delete the pending request ``requester_id -> rejecter_id`` if present."""

    with store_errors(db, "reject friend request"):
        stmt = delete(Relationship).where(
            _edge_clause(requester_id, rejecter_id),
            Relationship.status == PENDING,
        )
        removed = db.execute(stmt).rowcount or 0
        db.commit()

    if removed:
        logger.info("Relationship request %s -> %s rejected", requester_id, rejecter_id)
    return removed > 0


def status_between(db: Session, a_id: UUID, b_id: UUID) -> RelationshipStatus:
    """Status of the edge ``a_id -> b_id``; read per direction, never symmetrised."""

    with store_errors(db, "read relationship status"):
        value = db.scalar(select(Relationship.status).where(_edge_clause(a_id, b_id)))
    return RelationshipStatus(value) if value else RelationshipStatus.NONE


def outgoing_statuses(db: Session, viewer_id: UUID, target_ids: Iterable[UUID]) -> dict[UUID, RelationshipStatus]:
    """Map each target to the status of ``viewer_id -> target``."""

    ids = list(target_ids)
    if not ids:
        return {}
    with store_errors(db, "read relationship statuses"):
        rows = db.execute(
            select(Relationship.following_id, Relationship.status).where(
                Relationship.follower_id == viewer_id,
                Relationship.following_id.in_(ids),
            )
        ).all()
    found = {following_id: RelationshipStatus(value) for following_id, value in rows}
    return {target_id: found.get(target_id, RelationshipStatus.NONE) for target_id in ids}


def _list_counterparts(db: Session, user_id: UUID, direction: EdgeDirection, status: str) -> list[UUID]:
    if direction == EdgeDirection.OUTGOING:
        column, anchor = Relationship.following_id, Relationship.follower_id
    else:
        column, anchor = Relationship.follower_id, Relationship.following_id
    stmt = (
        select(column)
        .where(anchor == user_id, Relationship.status == status)
        .order_by(Relationship.created_at.asc())
    )
    with store_errors(db, f"list {status} relationships"):
        return list(db.scalars(stmt))


def list_accepted(db: Session, user_id: UUID, direction: EdgeDirection = EdgeDirection.OUTGOING) -> list[UUID]:
    """Ids with an accepted edge from (outgoing) or to (incoming) ``user_id``."""

    return _list_counterparts(db, user_id, EdgeDirection(direction), ACCEPTED)


def list_pending(db: Session, user_id: UUID, direction: EdgeDirection = EdgeDirection.INCOMING) -> list[UUID]:
    """Requesters awaiting ``user_id`` (incoming) or users ``user_id`` is waiting on (outgoing)."""

    return _list_counterparts(db, user_id, EdgeDirection(direction), PENDING)


def suggestions(db: Session, user_id: UUID, limit: int) -> list[UUID]:
    """Users with no edge to or from ``user_id``. Order carries no meaning."""

    if limit <= 0:
        return []
    outgoing = select(Relationship.following_id).where(Relationship.follower_id == user_id)
    incoming = select(Relationship.follower_id).where(Relationship.following_id == user_id)
    stmt = (
        select(User.id)
        .where(User.id != user_id, User.id.not_in(outgoing), User.id.not_in(incoming))
        .order_by(User.created_at.desc())
        .limit(limit)
    )
    with store_errors(db, "list suggestions"):
        return list(db.scalars(stmt))


def repair_mutual_edges(db: Session, user_id: UUID) -> int:
    """Restore the missing half of any one-sided accepted friendship touching ``user_id``."""

    reverse = aliased(Relationship)
    stmt = (
        select(Relationship.follower_id, Relationship.following_id)
        .outerjoin(
            reverse,
            and_(
                reverse.follower_id == Relationship.following_id,
                reverse.following_id == Relationship.follower_id,
            ),
        )
        .where(
            Relationship.status == ACCEPTED,
            or_(Relationship.follower_id == user_id, Relationship.following_id == user_id),
            or_(reverse.follower_id.is_(None), reverse.status != ACCEPTED),
        )
    )
    with store_errors(db, "repair mutual relationships"):
        broken = db.execute(stmt).all()
        for follower_id, following_id in broken:
            _upsert_accepted(db, following_id, follower_id)
        if broken:
            db.commit()

    if broken:
        logger.warning("Repaired %d one-sided friendships for user %s", len(broken), user_id)
    return len(broken)


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    with store_errors(db, "read follow stats"):
        _require_user(db, user_id)
        followers_count = db.scalar(
            select(func.count())
            .select_from(Relationship)
            .where(Relationship.following_id == user_id, Relationship.status == ACCEPTED)
        ) or 0
        following_count = db.scalar(
            select(func.count())
            .select_from(Relationship)
            .where(Relationship.follower_id == user_id, Relationship.status == ACCEPTED)
        ) or 0

    viewer_status = RelationshipStatus.NONE
    if viewer_id is not None and viewer_id != user_id:
        viewer_status = status_between(db, viewer_id, user_id)

    return FollowStats(
        user_id=user_id,
        followers_count=int(followers_count),
        following_count=int(following_count),
        viewer_status=viewer_status,
    )


__all__ = [
    "EdgeDirection",
    "FollowStats",
    "follow_user",
    "unfollow_user",
    "accept_request",
    "reject_request",
    "status_between",
    "outgoing_statuses",
    "list_accepted",
    "list_pending",
    "suggestions",
    "repair_mutual_edges",
    "get_follow_stats",
]
