"""Domain errors raised by the service layer.

Services raise these; the HTTP layer maps each class to a status code in
``socialgraph.main``. Callers embedding the services directly can tell the
failures apart by type.
"""
from __future__ import annotations

from uuid import UUID


class SocialGraphError(RuntimeError):
    """Base class for every error surfaced by the service layer."""

    detail = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class SelfRelationshipError(SocialGraphError):
    detail = "Cannot follow yourself"


class DuplicateRequestError(SocialGraphError):
    """An edge already exists for the ordered pair."""

    def __init__(self, follower_id: UUID, following_id: UUID) -> None:
        self.follower_id = follower_id
        self.following_id = following_id
        super().__init__("Relationship already exists")


class NoSuchRequestError(SocialGraphError):
    """There is no pending request to act on."""

    def __init__(self, requester_id: UUID, recipient_id: UUID) -> None:
        self.requester_id = requester_id
        self.recipient_id = recipient_id
        super().__init__("No pending request from this user")


class UnknownTargetError(SocialGraphError):
    def __init__(self, user_id: UUID | str) -> None:
        self.user_id = user_id
        super().__init__("User not found")


class DuplicateHandleError(SocialGraphError):
    detail = "Handle already in use"


class PostNotFoundError(SocialGraphError):
    def __init__(self, post_id: UUID) -> None:
        self.post_id = post_id
        super().__init__("Post not found")


class InvalidContentError(SocialGraphError):
    detail = "Content cannot be empty"


class NotOwnerError(SocialGraphError):
    detail = "Only the author can modify this post"


class ProfileAccessDenied(SocialGraphError):
    detail = "Profile is only visible to friends"


class StoreUnavailableError(SocialGraphError):
    """The backing store failed; the original exception is chained."""

    detail = "Storage backend unavailable"


__all__ = [
    "SocialGraphError",
    "SelfRelationshipError",
    "DuplicateRequestError",
    "NoSuchRequestError",
    "UnknownTargetError",
    "DuplicateHandleError",
    "PostNotFoundError",
    "InvalidContentError",
    "NotOwnerError",
    "ProfileAccessDenied",
    "StoreUnavailableError",
]
