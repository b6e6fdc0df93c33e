"""Pydantic schemas for posts and the personalised feed."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from .profiles import ProfileSummary


class PostCreate(BaseModel):
    """Payload used by API clients when publishing a post."""

    content: str = Field(..., min_length=1, max_length=2000)
    image_url: HttpUrl | None = None
    sentiment: str | None = Field(default=None, max_length=64)


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    author_id: UUID
    content: str
    created_at: datetime


class PostResponse(BaseModel):
    """Serialized representation of a persisted post."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    content: str
    image_url: str | None = None
    sentiment: str | None = None
    created_at: datetime


class FeedEntryResponse(BaseModel):
    """A post as seen by one viewer."""

    post: PostResponse
    author: ProfileSummary
    like_count: int = 0
    comments: list[CommentResponse] = Field(default_factory=list)
    is_liked: bool = False


class FeedResponse(BaseModel):
    """Envelope used when returning a collection of feed entries."""

    items: list[FeedEntryResponse]


class LikeResponse(BaseModel):
    post_id: UUID
    liked: bool
    like_count: int


class SaveResponse(BaseModel):
    post_id: UUID
    saved: bool


__all__ = [
    "PostCreate",
    "CommentCreate",
    "CommentResponse",
    "PostResponse",
    "FeedEntryResponse",
    "FeedResponse",
    "LikeResponse",
    "SaveResponse",
]
