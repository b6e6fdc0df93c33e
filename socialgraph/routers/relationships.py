"""Friend request and relationship graph API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from ..schemas import (
    ConnectionListResponse,
    FollowStatsResponse,
    PendingRequestsResponse,
    ProfileSummary,
    RelationshipActionResponse,
    RelationshipResponse,
    RelationshipStatusResponse,
    UserSearchResponse,
    UserSearchResult,
)
from ..services import (
    EdgeDirection,
    accept_request,
    follow_user,
    get_current_user,
    get_follow_stats,
    get_profiles,
    list_accepted,
    list_pending,
    outgoing_statuses,
    reject_request,
    repair_mutual_edges,
    search_users,
    status_between,
    suggestions,
    unfollow_user,
)

router = APIRouter(prefix="/relationships", tags=["relationships"])


def _summaries(db: Session, user_ids: list[UUID]) -> list[ProfileSummary]:
    profiles = get_profiles(db, user_ids)
    return [ProfileSummary.model_validate(profiles[user_id]) for user_id in user_ids if user_id in profiles]


@router.post("/{target_id}", response_model=RelationshipResponse, status_code=status.HTTP_201_CREATED)
async def follow_endpoint(
    target_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipResponse:
    edge = follow_user(db, requester_id=current_user.id, target_id=target_id)
    return RelationshipResponse.model_validate(edge)


@router.delete("/{target_id}", response_model=RelationshipActionResponse)
async def unfollow_endpoint(
    target_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipActionResponse:
    changed = unfollow_user(db, actor_id=current_user.id, target_id=target_id)
    return RelationshipActionResponse(
        target_id=target_id,
        changed=changed,
        status=status_between(db, current_user.id, target_id),
    )


@router.get("/requests", response_model=PendingRequestsResponse)
async def pending_requests_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PendingRequestsResponse:
    incoming = list_pending(db, current_user.id, EdgeDirection.INCOMING)
    outgoing = list_pending(db, current_user.id, EdgeDirection.OUTGOING)
    return PendingRequestsResponse(incoming=_summaries(db, incoming), outgoing=_summaries(db, outgoing))


@router.post("/requests/{requester_id}/accept", response_model=RelationshipResponse)
async def accept_request_endpoint(
    requester_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipResponse:
    edge = accept_request(db, accepter_id=current_user.id, requester_id=requester_id)
    return RelationshipResponse.model_validate(edge)


@router.post("/requests/{requester_id}/reject", response_model=RelationshipActionResponse)
async def reject_request_endpoint(
    requester_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipActionResponse:
    changed = reject_request(db, rejecter_id=current_user.id, requester_id=requester_id)
    return RelationshipActionResponse(
        target_id=requester_id,
        changed=changed,
        status=status_between(db, requester_id, current_user.id),
    )


@router.get("/status/{target_id}", response_model=RelationshipStatusResponse)
async def status_endpoint(
    target_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> RelationshipStatusResponse:
    return RelationshipStatusResponse(
        user_id=current_user.id,
        target_id=target_id,
        outgoing=status_between(db, current_user.id, target_id),
        incoming=status_between(db, target_id, current_user.id),
    )


@router.get("/following", response_model=ConnectionListResponse)
async def following_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConnectionListResponse:
    repair_mutual_edges(db, current_user.id)
    ids = list_accepted(db, current_user.id, EdgeDirection.OUTGOING)
    return ConnectionListResponse(items=_summaries(db, ids))


@router.get("/followers", response_model=ConnectionListResponse)
async def followers_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConnectionListResponse:
    repair_mutual_edges(db, current_user.id)
    ids = list_accepted(db, current_user.id, EdgeDirection.INCOMING)
    return ConnectionListResponse(items=_summaries(db, ids))


@router.get("/suggestions", response_model=ConnectionListResponse)
async def suggestions_endpoint(
    limit: int | None = Query(None, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConnectionListResponse:
    ids = suggestions(db, current_user.id, limit or get_settings().suggestion_limit)
    return ConnectionListResponse(items=_summaries(db, ids))


@router.get("/stats/{user_id}", response_model=FollowStatsResponse)
async def stats_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FollowStatsResponse:
    stats = get_follow_stats(db, user_id=user_id, viewer_id=current_user.id)
    return FollowStatsResponse(
        user_id=stats.user_id,
        followers_count=stats.followers_count,
        following_count=stats.following_count,
        viewer_status=stats.viewer_status,
    )


@router.get("/search", response_model=UserSearchResponse)
async def search_endpoint(
    q: str = Query("", max_length=150, alias="query"),
    limit: int | None = Query(None, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UserSearchResponse:
    query = q.strip()
    users = search_users(db, query=query, viewer_id=current_user.id, limit=limit or get_settings().search_limit)
    statuses = outgoing_statuses(db, current_user.id, [user.id for user in users])
    results = [
        UserSearchResult(
            id=user.id,
            display_name=user.display_name,
            handle=user.handle,
            avatar_url=user.avatar_url,
            bio=user.bio,
            status=statuses[user.id],
        )
        for user in users
    ]
    return UserSearchResponse(query=query, results=results)


__all__ = ["router"]
