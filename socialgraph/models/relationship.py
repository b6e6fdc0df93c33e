"""ORM model for directed relationship edges between users.

A row ``(follower_id, following_id)`` means the follower has requested or
been granted a connection to the followed user. The composite primary key
guarantees at most one edge per ordered pair; the absence of a row is the
``none`` state.
"""
from __future__ import annotations

from enum import StrEnum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from socialgraph.database import Base


class RelationshipStatus(StrEnum):
    NONE = "none"
    PENDING = "pending"
    ACCEPTED = "accepted"


STORED_STATUSES = (RelationshipStatus.PENDING.value, RelationshipStatus.ACCEPTED.value)


class Relationship(Base):
    __tablename__ = "relationships"

    follower_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    following_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    status = Column(
        Enum(*STORED_STATUSES, name="relationship_status"),
        nullable=False,
        default=RelationshipStatus.PENDING.value,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="outgoing_relationships")
    following = relationship("User", foreign_keys=[following_id], back_populates="incoming_relationships")

    __table_args__ = (CheckConstraint("follower_id <> following_id", name="ck_relationships_no_self_edge"),)

    def __repr__(self) -> str:
        return f"<Relationship {self.follower_id} -> {self.following_id} ({self.status})>"


__all__ = ["Relationship", "RelationshipStatus", "STORED_STATUSES"]
