from __future__ import annotations

from typing import Protocol

from discussion_service.domain.entities.discussion import Discussion


class DiscussionReader(Protocol):
    async def get_by_id(self, discussion_id: str) -> Discussion | None:
        """Discussion with its participant ids, or None."""
        ...
