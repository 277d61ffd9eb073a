from __future__ import annotations

from discussion_service.domain.entities.message import ChatMessage
from discussion_service.infrastructure.db.models.message import DiscussionMessageModel


def model_to_entity(model: DiscussionMessageModel) -> ChatMessage:
    return ChatMessage(
        id=model.id,
        discussion_id=model.discussion_id,
        sender_id=model.sender_id,
        sender_username=model.sender_username,
        content=model.content,
        created_at=model.created_at,
    )


def entity_to_model(entity: ChatMessage) -> DiscussionMessageModel:
    return DiscussionMessageModel(
        id=entity.id,
        discussion_id=entity.discussion_id,
        sender_id=entity.sender_id,
        sender_username=entity.sender_username,
        content=entity.content,
        created_at=entity.created_at,
    )
