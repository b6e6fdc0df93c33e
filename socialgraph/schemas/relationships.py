"""Schemas for the relationship graph endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ..models import RelationshipStatus
from .profiles import ProfileSummary


class RelationshipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    follower_id: UUID
    following_id: UUID
    status: RelationshipStatus
    created_at: datetime


class RelationshipActionResponse(BaseModel):
    target_id: UUID
    changed: bool
    status: RelationshipStatus


class RelationshipStatusResponse(BaseModel):
    user_id: UUID
    target_id: UUID
    outgoing: RelationshipStatus
    incoming: RelationshipStatus


class ConnectionListResponse(BaseModel):
    items: list[ProfileSummary]


class PendingRequestsResponse(BaseModel):
    incoming: list[ProfileSummary]
    outgoing: list[ProfileSummary]


class FollowStatsResponse(BaseModel):
    user_id: UUID
    followers_count: int
    following_count: int
    viewer_status: RelationshipStatus


class UserSearchResult(ProfileSummary):
    bio: str | None = None
    status: RelationshipStatus


class UserSearchResponse(BaseModel):
    query: str
    results: list[UserSearchResult]


__all__ = [
    "RelationshipResponse",
    "RelationshipActionResponse",
    "RelationshipStatusResponse",
    "ConnectionListResponse",
    "PendingRequestsResponse",
    "FollowStatsResponse",
    "UserSearchResult",
    "UserSearchResponse",
]
