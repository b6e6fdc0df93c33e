"""Schemas for profile endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class ProfileSummary(BaseModel):
    """Author and counterpart metadata embedded in lists and feed entries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: str | None = None
    handle: str | None = None
    avatar_url: str | None = None


class ProfileResponse(ProfileSummary):
    username: str
    bio: str | None = None
    cover_url: str | None = None
    cover_position: str | None = None
    created_at: datetime


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, max_length=150)
    handle: str | None = Field(default=None, max_length=63, pattern=r"^@?[A-Za-z0-9_.]+$")
    avatar_url: HttpUrl | None = None
    bio: str | None = Field(default=None, max_length=500)
    cover_url: HttpUrl | None = None
    cover_position: str | None = Field(default=None, max_length=32)

    @field_validator("avatar_url", "cover_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, value):
        if value in ("", "None"):
            return None
        return value


__all__ = ["ProfileSummary", "ProfileResponse", "ProfileUpdateRequest"]
