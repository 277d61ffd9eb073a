from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class ChatMessage:
    id: UUID
    discussion_id: str
    sender_id: str
    sender_username: str
    content: str
    created_at: datetime
