from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from discussion_service.api.v1.schemas.common import PaginationMeta


class MessageResponse(BaseModel):
    id: UUID
    discussion_id: str
    sender_id: str
    sender_username: str
    content: str
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessagePageResponse(BaseModel):
    """Newest-first page of a discussion's chat history."""

    success: bool = True
    count: int
    total: int
    pagination: PaginationMeta
    data: list[MessageResponse]
