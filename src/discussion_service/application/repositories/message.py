from __future__ import annotations

from typing import Protocol

from discussion_service.domain.entities.message import ChatMessage


class MessageReader(Protocol):
    async def list_page(
        self,
        discussion_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ChatMessage]:
        """Newest-first slice of a discussion's messages."""
        ...

    async def count(self, discussion_id: str) -> int: ...


class MessageWriter(Protocol):
    async def append(self, message: ChatMessage) -> ChatMessage:
        """Insert message. Append-only: there is no update or delete."""
        ...
