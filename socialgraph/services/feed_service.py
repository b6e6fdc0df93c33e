"""Feed visibility: which authors a viewer may see, and the feed built from them.

Nothing here holds state. Every answer is derived from the relationship
graph as stored at call time plus the posts handed in by the post store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from ..errors import PostNotFoundError, ProfileAccessDenied
from ..models import Post, PostComment, RelationshipStatus, User
from .post_service import comments_for, get_post, like_counts, liked_post_ids, list_recent
from .profile_service import get_profile, get_profiles
from .relationship_service import EdgeDirection, list_accepted, status_between


@dataclass(slots=True)
class FeedEntry:
    post: Post
    author: User
    like_count: int = 0
    comments: list[PostComment] = field(default_factory=list)
    is_liked: bool = False


def visible_authors(db: Session, viewer_id: UUID) -> set[UUID]:
    """The viewer plus everyone the viewer has an accepted outgoing edge to."""

    return {viewer_id, *list_accepted(db, viewer_id, EdgeDirection.OUTGOING)}


def filter_feed(posts: Iterable[Post], authors: set[UUID]) -> list[Post]:
    """Keep posts by ``authors``, newest first with ties broken by id descending."""

    admitted = [post for post in posts if post.author_id in authors]
    admitted.sort(key=lambda post: (post.created_at, post.id), reverse=True)
    return admitted


def filter_feed_for_viewer(db: Session, posts: Iterable[Post], viewer_id: UUID) -> list[Post]:
    return filter_feed(posts, visible_authors(db, viewer_id))


def can_view_profile(db: Session, viewer_id: UUID, target_id: UUID) -> bool:
    if viewer_id == target_id:
        return True
    return status_between(db, viewer_id, target_id) == RelationshipStatus.ACCEPTED


def require_profile_access(db: Session, *, viewer_id: UUID, target_id: UUID) -> User:
    """Return the full profile or raise :class:`ProfileAccessDenied`."""

    target = get_profile(db, target_id)
    if not can_view_profile(db, viewer_id, target_id):
        raise ProfileAccessDenied()
    return target


def get_visible_post(db: Session, *, post_id: UUID, viewer_id: UUID) -> Post:
    """Load a post the viewer is allowed to see.

    Hidden posts are reported as missing so their existence does not leak.
    """

    post = get_post(db, post_id)
    if post.author_id not in visible_authors(db, viewer_id):
        raise PostNotFoundError(post_id)
    return post


def build_entries(db: Session, posts: list[Post], *, viewer_id: UUID) -> list[FeedEntry]:
    """Attach author metadata, like counts, comments and the viewer's like state."""

    post_ids = [post.id for post in posts]
    authors = get_profiles(db, list({post.author_id for post in posts}))
    counts = like_counts(db, post_ids)
    liked = liked_post_ids(db, user_id=viewer_id, post_ids=post_ids)
    comments = comments_for(db, post_ids)
    return [
        FeedEntry(
            post=post,
            author=authors[post.author_id],
            like_count=counts.get(post.id, 0),
            comments=list(comments.get(post.id, [])),
            is_liked=post.id in liked,
        )
        for post in posts
        if post.author_id in authors
    ]


def build_feed(db: Session, *, viewer_id: UUID, limit: int) -> list[FeedEntry]:
    authors = visible_authors(db, viewer_id)
    candidates = list_recent(db, limit, author_ids=authors)
    return build_entries(db, filter_feed(candidates, authors), viewer_id=viewer_id)


__all__ = [
    "FeedEntry",
    "visible_authors",
    "filter_feed",
    "filter_feed_for_viewer",
    "can_view_profile",
    "require_profile_access",
    "get_visible_post",
    "build_entries",
    "build_feed",
]
