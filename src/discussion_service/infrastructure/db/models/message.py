from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from discussion_service.infrastructure.db.base import Base


class DiscussionMessageModel(Base):
    __tablename__ = "discussion_messages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    # No ON DELETE CASCADE: deleting a discussion orphans its chat history.
    discussion_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("discussions.id"),
        nullable=False,
    )
    sender_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sender_username: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    __table_args__ = (
        Index("ix_discussion_messages_timeline", "discussion_id", created_at.desc()),
        Index("ix_discussion_messages_sender", "sender_id"),
    )
