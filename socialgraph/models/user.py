"""ORM model for users and the profile fields stored alongside them."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from socialgraph.database import Base
from .base import TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    display_name = Column(String(150), nullable=True)
    handle = Column(String(64), unique=True, nullable=True, index=True)
    avatar_url = Column(String(1024), nullable=True)
    bio = Column(String(500), nullable=True)
    cover_url = Column(String(1024), nullable=True)
    cover_position = Column(String(32), nullable=True)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    outgoing_relationships = relationship(
        "Relationship",
        foreign_keys="Relationship.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    incoming_relationships = relationship(
        "Relationship",
        foreign_keys="Relationship.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    post_likes = relationship("PostLike", back_populates="user", cascade="all, delete-orphan")
    post_comments = relationship("PostComment", back_populates="author", cascade="all, delete-orphan")
    saved_posts = relationship("SavedPost", back_populates="user", cascade="all, delete-orphan")


__all__ = ["User"]
