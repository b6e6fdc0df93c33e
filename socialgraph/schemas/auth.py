"""Schemas for registration and login."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=150, pattern=r"^[A-Za-z0-9_.]+$")
    password: str = Field(..., min_length=8, max_length=72)
    display_name: str | None = Field(default=None, max_length=150)


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthResponse(BaseModel):
    user_id: UUID
    username: str
    access_token: str
    token_type: str = "bearer"


__all__ = ["RegisterRequest", "LoginRequest", "AuthResponse"]
