"""Seed development data: creates tables, a sample discussion and its chat history.

Prints a token for the host so both sockets can be tried right away:
``ws://localhost:8000/ws/chat?token=...``.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from discussion_service.application.dto.principal import Principal
from discussion_service.application.uow import UnitOfWork
from discussion_service.config import settings
from discussion_service.domain.entities.discussion import Discussion
from discussion_service.domain.value_objects.enums import DiscussionStatus
from discussion_service.infrastructure.db import models  # noqa: F401
from discussion_service.infrastructure.db.base import Base
from discussion_service.infrastructure.db.mappers import discussion as discussion_mapper
from discussion_service.infrastructure.db.session import AsyncSessionLocal, engine
from discussion_service.infrastructure.db.uow import SqlAlchemyUoW
from discussion_service.services import message_service

logger = logging.getLogger(__name__)

DISCUSSION_ID = "dev-discussion"
HOST = Principal(user_id="dev-host", username="host", email="host@forumx.dev")
GUEST = Principal(user_id="dev-guest", username="guest", email="guest@forumx.dev")

SAMPLE_MESSAGES = [
    (HOST, "Welcome to the discussion!"),
    (GUEST, "Hi, glad to be here."),
    (HOST, "Turn on your mic when you are ready."),
]


def dev_token(principal: Principal, ttl: timedelta = timedelta(days=7)) -> str:
    return jwt.encode(
        {
            "id": principal.user_id,
            "username": principal.username,
            "email": principal.email,
            "exp": datetime.now(timezone.utc) + ttl,
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


async def seed_history(uow: UnitOfWork, session: AsyncSession) -> int:
    """Create the sample discussion with its messages once; return messages added."""
    if await uow.discussions.get_by_id(DISCUSSION_ID) is not None:
        return 0

    session.add(discussion_mapper.entity_to_model(Discussion(
        id=DISCUSSION_ID,
        title="Dev discussion",
        host_id=HOST.user_id,
        community_id="dev-community",
        status=DiscussionStatus.ACTIVE,
        is_private=False,
        start_time=datetime.now(timezone.utc),
        participant_ids=frozenset({GUEST.user_id}),
    )))
    await session.flush()

    for sender, content in SAMPLE_MESSAGES:
        await message_service.append_message(DISCUSSION_ID, sender, content, uow)
    return len(SAMPLE_MESSAGES)


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        added = await seed_history(SqlAlchemyUoW(session), session)
        if added:
            logger.info("Seeded discussion %s with %d messages", DISCUSSION_ID, added)
        else:
            logger.info("Discussion %s already seeded", DISCUSSION_ID)
    print(f"host token:  {dev_token(HOST)}")
    print(f"guest token: {dev_token(GUEST)}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
