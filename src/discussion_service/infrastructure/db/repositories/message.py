from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from discussion_service.domain.entities.message import ChatMessage
from discussion_service.infrastructure.db.mappers import message as mapper
from discussion_service.infrastructure.db.models.message import DiscussionMessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_page(
        self,
        discussion_id: str,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ChatMessage]:
        stmt = (
            select(DiscussionMessageModel)
            .where(DiscussionMessageModel.discussion_id == discussion_id)
            .order_by(DiscussionMessageModel.created_at.desc(), DiscussionMessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count(self, discussion_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(DiscussionMessageModel)
            .where(DiscussionMessageModel.discussion_id == discussion_id)
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, message: ChatMessage) -> ChatMessage:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)
