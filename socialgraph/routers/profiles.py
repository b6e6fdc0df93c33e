"""Profile API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import ProfileResponse, ProfileUpdateRequest
from ..services import get_current_user, require_profile_access, upsert_profile
from ..services.profile_service import get_profile_by_handle

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def my_profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    updated = upsert_profile(db, user_id=current_user.id, payload=payload)
    return ProfileResponse.model_validate(updated)


@router.get("/by-handle/{handle}", response_model=ProfileResponse)
async def retrieve_profile_by_handle(
    handle: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    target = get_profile_by_handle(db, handle)
    target = require_profile_access(db, viewer_id=current_user.id, target_id=target.id)
    return ProfileResponse.model_validate(target)


@router.get("/{user_id}", response_model=ProfileResponse)
async def retrieve_profile(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    """Full profile of ``user_id``; only the owner and accepted friends may view it."""

    target = require_profile_access(db, viewer_id=current_user.id, target_id=user_id)
    return ProfileResponse.model_validate(target)


__all__ = ["router"]
