from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from discussion_service.application.repositories.discussion import DiscussionReader
from discussion_service.application.repositories.message import MessageReader, MessageWriter


class UnitOfWork(Protocol):
    discussions: DiscussionReader
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...


UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
