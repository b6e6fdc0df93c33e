"""Profile records stored on the ``users`` table."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateHandleError, UnknownTargetError
from ..models import User
from ..schemas import ProfileUpdateRequest
from .store import store_errors


def normalize_handle(value: str | None) -> str | None:
    """Return ``value`` as a lowercase ``@name`` handle, or ``None`` when blank."""

    if value is None:
        return None
    stripped = value.strip().lstrip("@").strip().lower()
    return f"@{stripped}" if stripped else None


def get_profile(db: Session, user_id: UUID) -> User:
    with store_errors(db, "load profile"):
        user = db.get(User, user_id)
    if user is None:
        raise UnknownTargetError(user_id)
    return user


def get_profiles(db: Session, user_ids: list[UUID]) -> dict[UUID, User]:
    """Bulk lookup used when decorating id lists with display metadata."""

    if not user_ids:
        return {}
    with store_errors(db, "load profiles"):
        users = db.scalars(select(User).where(User.id.in_(user_ids)))
        return {user.id: user for user in users}


def get_profile_by_handle(db: Session, handle: str) -> User:
    normalized = normalize_handle(handle)
    with store_errors(db, "load profile"):
        user = db.scalar(select(User).where(User.handle == normalized)) if normalized else None
    if user is None:
        raise UnknownTargetError(handle)
    return user


def upsert_profile(db: Session, *, user_id: UUID, payload: ProfileUpdateRequest) -> User:
    """Apply only the fields the client actually sent."""

    user = get_profile(db, user_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "handle" in update_data:
        handle = normalize_handle(update_data["handle"])
        if handle is None:
            # A handle can be changed but never cleared.
            update_data.pop("handle")
        else:
            update_data["handle"] = handle
            with store_errors(db, "check handle"):
                taken = db.scalar(select(User.id).where(User.handle == handle, User.id != user_id))
            if taken is not None:
                raise DuplicateHandleError()

    for field, value in update_data.items():
        setattr(user, field, str(value) if value is not None and field.endswith("_url") else value)

    with store_errors(db, "update profile"):
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateHandleError() from exc
        db.refresh(user)
    return user


def search_users(db: Session, *, query: str, viewer_id: UUID, limit: int) -> list[User]:
    """Match display name, handle or username, never returning the viewer."""

    stmt = select(User).where(User.id != viewer_id)
    term = query.strip().lstrip("@")
    if term:
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        stmt = stmt.where(
            or_(
                User.display_name.ilike(pattern, escape="\\"),
                User.handle.ilike(pattern, escape="\\"),
                User.username.ilike(pattern, escape="\\"),
            )
        )
    stmt = stmt.order_by(User.username.asc()).limit(limit)
    with store_errors(db, "search users"):
        return list(db.scalars(stmt))


__all__ = [
    "normalize_handle",
    "get_profile",
    "get_profiles",
    "get_profile_by_handle",
    "upsert_profile",
    "search_users",
]
