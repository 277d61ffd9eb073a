"""Shared test fixtures."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import TracebackType
from typing import Any, Iterable

import jwt
import pytest

from discussion_service.application.dto.principal import Principal
from discussion_service.config import settings
from discussion_service.domain.entities.discussion import Discussion
from discussion_service.domain.entities.message import ChatMessage
from discussion_service.domain.value_objects.enums import DiscussionStatus


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id="u-alice", username="alice", email="alice@example.com")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id="u-bob", username="bob", email="bob@example.com")


@pytest.fixture
def carol() -> Principal:
    return Principal(user_id="u-carol", username="carol", email="carol@example.com")


def make_token(
    user_id: str = "u-alice",
    username: str = "alice",
    *,
    secret: str | None = None,
    expires_in: timedelta | None = timedelta(hours=1),
) -> str:
    payload: dict[str, Any] = {"id": user_id, "username": username, "email": f"{username}@example.com"}
    if expires_in is not None:
        payload["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def make_discussion(
    discussion_id: str = "d1",
    *,
    host_id: str = "u-host",
    status: str = DiscussionStatus.ACTIVE,
    is_private: bool = False,
    participants: Iterable[str] = (),
) -> Discussion:
    return Discussion(
        id=discussion_id,
        title=f"Discussion {discussion_id}",
        host_id=host_id,
        community_id="c1",
        status=status,
        is_private=is_private,
        start_time=datetime.now(timezone.utc),
        participant_ids=frozenset(participants),
    )


def make_message(
    *,
    discussion_id: str = "d1",
    sender_id: str = "u-alice",
    sender_username: str = "alice",
    content: str = "hello",
    created_at: datetime | None = None,
) -> ChatMessage:
    return ChatMessage(
        id=uuid.uuid4(),
        discussion_id=discussion_id,
        sender_id=sender_id,
        sender_username=sender_username,
        content=content,
        created_at=created_at or datetime.now(timezone.utc),
    )


class FixedClock:
    def __init__(self, at: datetime | None = None) -> None:
        self.at = at or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.at


@dataclass
class FakeDiscussionReader:
    _store: dict[str, Discussion] = field(default_factory=dict)
    fail: bool = False

    def add(self, *discussions: Discussion) -> None:
        for d in discussions:
            self._store[d.id] = d

    async def get_by_id(self, discussion_id: str) -> Discussion | None:
        if self.fail:
            raise ConnectionError("database is down")
        return self._store.get(discussion_id)


@dataclass
class FakeMessageReader:
    _messages: list[ChatMessage] = field(default_factory=list)

    def _newest_first(self, discussion_id: str) -> list[ChatMessage]:
        own = [m for m in self._messages if m.discussion_id == discussion_id]
        return sorted(own, key=lambda m: (m.created_at, str(m.id)), reverse=True)

    async def list_page(self, discussion_id: str, *, offset: int = 0, limit: int = 50) -> list[ChatMessage]:
        return self._newest_first(discussion_id)[offset:offset + limit]

    async def count(self, discussion_id: str) -> int:
        return len(self._newest_first(discussion_id))


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail: bool = False

    async def append(self, message: ChatMessage) -> ChatMessage:
        if self.fail:
            raise ConnectionError("database is down")
        self._reader._messages.append(message)
        return message


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests; also usable as its own async context manager."""
    discussions: FakeDiscussionReader = field(default_factory=FakeDiscussionReader)
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    commits: int = 0
    rollbacks: int = 0

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def factory(self) -> "FakeUoW":
        return self

    async def __aenter__(self) -> "FakeUoW":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@dataclass
class FakeEmitter:
    """Records every delivery as (connection_id, event_type, data)."""
    connected: set[str] = field(default_factory=set)
    sent: list[tuple[str, str, Any]] = field(default_factory=list)

    def connect(self, *connection_ids: str) -> None:
        self.connected.update(connection_ids)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self.connected

    async def send(self, connection_id: str, event_type: str, data: Any) -> None:
        if connection_id in self.connected:
            self.sent.append((connection_id, str(event_type), data))

    async def broadcast(self, connection_ids: Iterable[str], event_type: str, data: Any) -> None:
        for connection_id in list(connection_ids):
            await self.send(connection_id, event_type, data)

    def received(self, connection_id: str, event_type: str | None = None) -> list[Any]:
        return [
            data for cid, ev, data in self.sent
            if cid == connection_id and (event_type is None or ev == event_type)
        ]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def uow() -> FakeUoW:
    uow = FakeUoW()
    uow.discussions.add(
        make_discussion("d1"),
        make_discussion("d2"),
    )
    return uow


@pytest.fixture
def emitter() -> FakeEmitter:
    emitter = FakeEmitter()
    emitter.connect("c-alice", "c-bob", "c-carol")
    return emitter
