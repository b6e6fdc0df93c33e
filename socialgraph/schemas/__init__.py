"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest
from .posts import (
    CommentCreate,
    CommentResponse,
    FeedEntryResponse,
    FeedResponse,
    LikeResponse,
    PostCreate,
    PostResponse,
    SaveResponse,
)
from .profiles import ProfileResponse, ProfileSummary, ProfileUpdateRequest
from .relationships import (
    ConnectionListResponse,
    FollowStatsResponse,
    PendingRequestsResponse,
    RelationshipActionResponse,
    RelationshipResponse,
    RelationshipStatusResponse,
    UserSearchResponse,
    UserSearchResult,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "CommentCreate",
    "CommentResponse",
    "FeedEntryResponse",
    "FeedResponse",
    "LikeResponse",
    "PostCreate",
    "PostResponse",
    "SaveResponse",
    "ProfileResponse",
    "ProfileSummary",
    "ProfileUpdateRequest",
    "ConnectionListResponse",
    "FollowStatsResponse",
    "PendingRequestsResponse",
    "RelationshipActionResponse",
    "RelationshipResponse",
    "RelationshipStatusResponse",
    "UserSearchResponse",
    "UserSearchResult",
]
