from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from discussion_service.domain.entities.discussion import Discussion
from discussion_service.infrastructure.db.mappers import discussion as mapper
from discussion_service.infrastructure.db.models.discussion import DiscussionModel


class DiscussionReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, discussion_id: str) -> Discussion | None:
        result = await self._session.get(DiscussionModel, discussion_id)
        return mapper.model_to_entity(result) if result else None
