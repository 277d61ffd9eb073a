from __future__ import annotations

import math
import uuid

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import ValidationError
from discussion_service.application.ports.clock import Clock, SystemClock
from discussion_service.application.uow import UnitOfWork
from discussion_service.domain.entities.message import ChatMessage

_system_clock = SystemClock()


def normalize_content(content: object, max_length: int) -> str:
    """Trim and bound a chat message body."""
    if not isinstance(content, str):
        raise ValidationError("Message content must be a string")
    content = content.strip()
    if not content:
        raise ValidationError("Message content is required")
    if len(content) > max_length:
        raise ValidationError(f"Message cannot exceed {max_length} characters")
    return content


def build_message(
    discussion_id: str,
    principal: Principal,
    content: str,
    clock: Clock = _system_clock,
) -> ChatMessage:
    """Sender fields always come from the verified principal, never the client."""
    return ChatMessage(
        id=uuid.uuid4(),
        discussion_id=discussion_id,
        sender_id=principal.user_id,
        sender_username=principal.username,
        content=content,
        created_at=clock.now(),
    )


async def append_message(
    discussion_id: str,
    principal: Principal,
    content: str,
    uow: UnitOfWork,
    *,
    clock: Clock = _system_clock,
) -> ChatMessage:
    msg = await uow.messages_w.append(build_message(discussion_id, principal, content, clock))
    await uow.commit()
    return msg


async def list_page(
    discussion_id: str,
    page: int,
    uow: UnitOfWork,
    page_size: int = 50,
) -> tuple[list[ChatMessage], int]:
    """Return (newest-first page, total count) for a discussion.

    Callers that render a timeline must reverse the page themselves, see
    ``chronological``.
    """
    if page < 1 or page_size < 1:
        raise ValidationError("page and limit must be positive")
    messages = await uow.messages.list_page(
        discussion_id, offset=(page - 1) * page_size, limit=page_size,
    )
    total = await uow.messages.count(discussion_id)
    return messages, total


def chronological(messages: list[ChatMessage]) -> list[ChatMessage]:
    return sorted(messages, key=lambda m: (m.created_at, str(m.id)))


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0
