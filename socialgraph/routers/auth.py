"""Registration and login routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest
from ..services import authenticate_user, create_access_token, get_current_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: Session = Depends(get_session)) -> AuthResponse:
    user, token = register_user(db, payload)
    return AuthResponse(user_id=user.id, username=user.username, access_token=token)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_session)) -> AuthResponse:
    user = authenticate_user(db, payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return AuthResponse(user_id=user.id, username=user.username, access_token=create_access_token(user.id))


@router.get("/me", response_model=ProfileResponse)
async def me(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


__all__ = ["router"]
