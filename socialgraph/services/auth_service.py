"""Identity provider: password login and bearer tokens that resolve to a user id."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import RegisterRequest
from ..security.secrets import MissingSecretError, require_secret
from .profile_service import normalize_handle

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
DEFAULT_TOKEN_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return _pwd_context.verify(password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash.
        return False


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT whose ``sub`` is the user id."""

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> UUID:
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    try:
        return UUID(str(subject))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


def register_user(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    """Create the account and its profile row, returning the user and a token."""

    handle = normalize_handle(payload.username)
    clash = db.scalar(select(User.id).where(or_(User.username == payload.username, User.handle == handle)))
    if clash is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    user = User(
        username=payload.username,
        hashed_password=hash_password(payload.password),
        display_name=(payload.display_name or "").strip() or payload.username,
        handle=handle,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user %s", payload.username)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to register user") from exc

    logger.info("Registered user %s (%s)", user.username, user.id)
    return user, create_access_token(user.id)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = db.scalar(select(User).where(User.username == username))
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated user from the bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    user = db.get(User, decode_access_token(credentials.credentials))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "register_user",
    "authenticate_user",
    "get_current_user",
]
