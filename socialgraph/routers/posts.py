"""Post and feed API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from ..schemas import (
    CommentCreate,
    CommentResponse,
    FeedEntryResponse,
    FeedResponse,
    LikeResponse,
    PostCreate,
    PostResponse,
    ProfileSummary,
    SaveResponse,
)
from ..services import (
    FeedEntry,
    add_comment,
    build_entries,
    build_feed,
    create_post,
    delete_post,
    get_current_user,
    get_visible_post,
    list_saved_posts,
    save_post,
    toggle_like,
    unsave_post,
)
from ..services.post_service import like_counts

router = APIRouter(prefix="/posts", tags=["posts"])


def _entry_response(entry: FeedEntry) -> FeedEntryResponse:
    return FeedEntryResponse(
        post=PostResponse.model_validate(entry.post),
        author=ProfileSummary.model_validate(entry.author),
        like_count=entry.like_count,
        comments=[CommentResponse.model_validate(comment) for comment in entry.comments],
        is_liked=entry.is_liked,
    )


@router.get("/feed", response_model=FeedResponse)
async def feed_endpoint(
    limit: int | None = Query(None, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FeedResponse:
    entries = build_feed(db, viewer_id=current_user.id, limit=limit or get_settings().feed_limit)
    return FeedResponse(items=[_entry_response(entry) for entry in entries])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PostResponse:
    post = create_post(
        db,
        author_id=current_user.id,
        content=payload.content,
        image_url=str(payload.image_url) if payload.image_url else None,
        sentiment=payload.sentiment,
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> Response:
    delete_post(db, post_id=post_id, author_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> LikeResponse:
    get_visible_post(db, post_id=post_id, viewer_id=current_user.id)
    liked = toggle_like(db, post_id=post_id, user_id=current_user.id)
    return LikeResponse(post_id=post_id, liked=liked, like_count=like_counts(db, [post_id]).get(post_id, 0))


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> CommentResponse:
    get_visible_post(db, post_id=post_id, viewer_id=current_user.id)
    comment = add_comment(db, post_id=post_id, author_id=current_user.id, content=payload.content)
    return CommentResponse.model_validate(comment)


@router.post("/{post_id}/save", response_model=SaveResponse)
async def save_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SaveResponse:
    get_visible_post(db, post_id=post_id, viewer_id=current_user.id)
    save_post(db, user_id=current_user.id, post_id=post_id)
    return SaveResponse(post_id=post_id, saved=True)


@router.delete("/{post_id}/save", response_model=SaveResponse)
async def unsave_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SaveResponse:
    unsave_post(db, user_id=current_user.id, post_id=post_id)
    return SaveResponse(post_id=post_id, saved=False)


@router.get("/saved", response_model=FeedResponse)
async def saved_posts_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FeedResponse:
    posts = list_saved_posts(db, user_id=current_user.id)
    entries = build_entries(db, posts, viewer_id=current_user.id)
    return FeedResponse(items=[_entry_response(entry) for entry in entries])


__all__ = ["router"]
