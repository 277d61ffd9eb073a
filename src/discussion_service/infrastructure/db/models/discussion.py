from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discussion_service.infrastructure.db.base import Base


class DiscussionModel(Base):
    """Owned and written by the forum API; this service only reads it."""

    __tablename__ = "discussions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    host_id: Mapped[str] = mapped_column(String(64), nullable=False)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_time: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    participants = relationship(
        "DiscussionParticipantModel",
        back_populates="discussion",
        lazy="selectin",
    )


class DiscussionParticipantModel(Base):
    __tablename__ = "discussion_participants"

    discussion_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("discussions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    discussion = relationship("DiscussionModel", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_discussion_participant"),
        Index("ix_discussion_participants_user", "user_id"),
    )
