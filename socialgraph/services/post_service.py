"""Post store: posts, likes, comments and saved posts."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Collection
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import InvalidContentError, NotOwnerError, PostNotFoundError, UnknownTargetError
from ..models import Post, PostComment, PostLike, Relationship, RelationshipStatus, SavedPost, User
from .store import store_errors

logger = logging.getLogger(__name__)


def _get_post_or_raise(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    return post


def get_post(db: Session, post_id: UUID) -> Post:
    with store_errors(db, "load post"):
        return _get_post_or_raise(db, post_id)


def list_recent(db: Session, limit: int, *, author_ids: Collection[UUID] | None = None) -> list[Post]:
    """Newest posts first, optionally restricted to ``author_ids``."""

    if limit <= 0 or (author_ids is not None and not author_ids):
        return []
    stmt = select(Post)
    if author_ids is not None:
        stmt = stmt.where(Post.author_id.in_(list(author_ids)))
    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
    with store_errors(db, "list posts"):
        return list(db.scalars(stmt))


def create_post(
    db: Session,
    *,
    author_id: UUID,
    content: str,
    image_url: str | None = None,
    sentiment: str | None = None,
) -> Post:
    """Create and persist a new post for ``author_id``."""

    text = content.strip()
    if not text:
        raise InvalidContentError("Post content cannot be empty")

    with store_errors(db, "create post"):
        if db.get(User, author_id) is None:
            raise UnknownTargetError(author_id)
        post = Post(author_id=author_id, content=text, image_url=image_url, sentiment=sentiment or None)
        db.add(post)
        db.commit()
        db.refresh(post)

    logger.info("Post %s created by %s", post.id, author_id)
    return post


def delete_post(db: Session, *, post_id: UUID, author_id: UUID) -> None:
    with store_errors(db, "delete post"):
        post = _get_post_or_raise(db, post_id)
        if post.author_id != author_id:
            raise NotOwnerError()
        db.delete(post)
        db.commit()

    logger.info("Post %s deleted by %s", post_id, author_id)


def toggle_like(db: Session, *, post_id: UUID, user_id: UUID) -> bool:
    """Flip the like for ``user_id`` and return the new state."""

    with store_errors(db, "toggle like"):
        _get_post_or_raise(db, post_id)
        removed = db.execute(
            delete(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
        ).rowcount
        if removed:
            db.commit()
            return False

        db.add(PostLike(post_id=post_id, user_id=user_id))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request already liked it.
            db.rollback()
        return True


def add_comment(db: Session, *, post_id: UUID, author_id: UUID, content: str) -> PostComment:
    text = content.strip()
    if not text:
        raise InvalidContentError("Comment cannot be empty")

    with store_errors(db, "add comment"):
        _get_post_or_raise(db, post_id)
        if db.get(User, author_id) is None:
            raise UnknownTargetError(author_id)
        comment = PostComment(post_id=post_id, author_id=author_id, content=text)
        db.add(comment)
        db.commit()
        db.refresh(comment)
    return comment


def like_counts(db: Session, post_ids: Collection[UUID]) -> dict[UUID, int]:
    if not post_ids:
        return {}
    stmt = (
        select(PostLike.post_id, func.count(PostLike.id))
        .where(PostLike.post_id.in_(list(post_ids)))
        .group_by(PostLike.post_id)
    )
    with store_errors(db, "count likes"):
        return {post_id: int(count) for post_id, count in db.execute(stmt)}


def liked_post_ids(db: Session, *, user_id: UUID, post_ids: Collection[UUID]) -> set[UUID]:
    if not post_ids:
        return set()
    stmt = select(PostLike.post_id).where(PostLike.user_id == user_id, PostLike.post_id.in_(list(post_ids)))
    with store_errors(db, "load likes"):
        return set(db.scalars(stmt))


def comments_for(db: Session, post_ids: Collection[UUID]) -> dict[UUID, list[PostComment]]:
    """Comments grouped by post, oldest first."""

    grouped: dict[UUID, list[PostComment]] = defaultdict(list)
    if not post_ids:
        return grouped
    stmt = (
        select(PostComment)
        .where(PostComment.post_id.in_(list(post_ids)))
        .order_by(PostComment.created_at.asc(), PostComment.id.asc())
    )
    with store_errors(db, "load comments"):
        for comment in db.scalars(stmt):
            grouped[comment.post_id].append(comment)
    return grouped


def save_post(db: Session, *, user_id: UUID, post_id: UUID) -> SavedPost:
    """Bookmark a post; saving twice returns the existing bookmark."""

    with store_errors(db, "save post"):
        _get_post_or_raise(db, post_id)
        existing = db.scalar(select(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id))
        if existing is not None:
            return existing
        saved = SavedPost(user_id=user_id, post_id=post_id)
        db.add(saved)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return db.scalar(select(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id))
        db.refresh(saved)
        return saved


def unsave_post(db: Session, *, user_id: UUID, post_id: UUID) -> bool:
    with store_errors(db, "unsave post"):
        removed = db.execute(
            delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
        ).rowcount
        db.commit()
    return bool(removed)


def list_saved_posts(db: Session, *, user_id: UUID) -> list[Post]:
    """Saved posts the user can still see, most recently saved first.

    Bookmarks stay stored after an unfriend but are only returned while the
    author is the user or an accepted friend.
    """

    friends = select(Relationship.following_id).where(
        Relationship.follower_id == user_id,
        Relationship.status == RelationshipStatus.ACCEPTED.value,
    )
    stmt = (
        select(Post)
        .join(SavedPost, SavedPost.post_id == Post.id)
        .where(SavedPost.user_id == user_id, or_(Post.author_id == user_id, Post.author_id.in_(friends)))
        .order_by(SavedPost.created_at.desc(), SavedPost.id.desc())
    )
    with store_errors(db, "list saved posts"):
        return list(db.scalars(stmt))


__all__ = [
    "get_post",
    "list_recent",
    "create_post",
    "delete_post",
    "toggle_like",
    "add_comment",
    "like_counts",
    "liked_post_ids",
    "comments_for",
    "save_post",
    "unsave_post",
    "list_saved_posts",
]
