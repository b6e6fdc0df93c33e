"""Convenience exports for ORM models."""
from .post import Post, PostComment, PostLike, SavedPost
from .relationship import Relationship, RelationshipStatus
from .user import User

__all__ = [
    "Post",
    "PostComment",
    "PostLike",
    "Relationship",
    "RelationshipStatus",
    "SavedPost",
    "User",
]
