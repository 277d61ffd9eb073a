"""Discussion chat: room subscriptions, persisted messages, typing indicators.

Events arrive from one read loop per connection, so handlers for the same
connection never overlap; handlers for different connections interleave only
at ``await`` points, and every registry mutation completes before the first
``await`` that follows it.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError as PayloadError

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import ValidationError
from discussion_service.application.ports.clock import Clock, SystemClock
from discussion_service.application.ports.emitter import EventEmitter
from discussion_service.application.uow import UoWFactory
from discussion_service.domain.entities.member import ChatMember
from discussion_service.domain.entities.message import ChatMessage
from discussion_service.domain.value_objects.enums import ChatEvent, ControlEvent
from discussion_service.infrastructure.ws.protocol import SendMessagePayload
from discussion_service.infrastructure.ws.rooms import RoomRegistry
from discussion_service.services import discussion_service, message_service

logger = logging.getLogger(__name__)

# Same JSON rendering as `createdAt` in the history endpoint.
_timestamp = TypeAdapter(datetime)


def message_event(msg: ChatMessage) -> dict[str, Any]:
    return {
        "id": str(msg.id),
        "userId": msg.sender_id,
        "username": msg.sender_username,
        "content": msg.content,
        "timestamp": _timestamp.dump_python(msg.created_at, mode="json"),
    }


def _room_id(data: Any) -> str | None:
    if isinstance(data, str) and data:
        return data
    return None


class ChatGateway:
    """Chat side of a discussion. A connection sits in at most one room."""

    def __init__(
        self,
        emitter: EventEmitter,
        uow_factory: UoWFactory,
        *,
        rooms: RoomRegistry[ChatMember] | None = None,
        clock: Clock | None = None,
        max_length: int = 2000,
    ) -> None:
        self._emitter = emitter
        self._uow_factory = uow_factory
        self.rooms: RoomRegistry[ChatMember] = rooms or RoomRegistry("chat")
        self._clock = clock or SystemClock()
        self._max_length = max_length
        self._current: dict[str, str] = {}

    def current_room(self, connection_id: str) -> str | None:
        return self._current.get(connection_id)

    async def dispatch(
        self,
        connection_id: str,
        principal: Principal,
        event_type: str,
        data: Any,
    ) -> None:
        if event_type == ChatEvent.JOIN:
            await self.join(connection_id, principal, data)
        elif event_type == ChatEvent.LEAVE:
            await self.leave(connection_id, data)
        elif event_type == ChatEvent.SEND:
            await self.send_message(connection_id, principal, data)
        elif event_type == ChatEvent.TYPING:
            await self.typing(connection_id, principal, data, stopped=False)
        elif event_type == ChatEvent.STOP_TYPING:
            await self.typing(connection_id, principal, data, stopped=True)
        else:
            logger.warning("Chat: unknown event %r from %s", event_type, connection_id)

    async def join(self, connection_id: str, principal: Principal, data: Any) -> None:
        discussion_id = _room_id(data)
        if discussion_id is None:
            logger.warning("Chat: join without discussionId from %s", connection_id)
            return
        if self.rooms.contains(discussion_id, connection_id):
            return

        refusal = await discussion_service.check_join(discussion_id, principal, self._uow_factory)
        if refusal is not None:
            logger.info("Chat: %s refused %s: %s", principal.username, discussion_id, refusal.detail)
            await self._emitter.send(
                connection_id, ControlEvent.ERROR,
                {"code": refusal.code, "detail": refusal.detail},
            )
            return

        member = ChatMember(connection_id, principal.user_id, principal.username)
        previous = self._current.get(connection_id)
        left = None
        if previous is not None:
            left = self.rooms.leave(previous, connection_id)
        self.rooms.join(discussion_id, connection_id, member)
        self._current[connection_id] = discussion_id
        logger.info("Chat: %s joined %s", principal.username, discussion_id)

        if previous is not None and left is not None:
            await self._notify_left(previous, left)
        await self._emitter.broadcast(
            self.rooms.connection_ids(discussion_id, exclude=connection_id),
            ChatEvent.USER_JOINED,
            {"userId": principal.user_id, "username": principal.username},
        )

    async def leave(self, connection_id: str, data: Any) -> None:
        discussion_id = _room_id(data)
        if discussion_id is None:
            logger.warning("Chat: leave without discussionId from %s", connection_id)
            return
        await self._leave_room(connection_id, discussion_id)

    async def send_message(self, connection_id: str, principal: Principal, data: Any) -> None:
        try:
            payload = SendMessagePayload.model_validate(data)
            content = message_service.normalize_content(payload.content, self._max_length)
        except (PayloadError, ValidationError) as exc:
            logger.warning("Chat: dropped message from %s: %s", connection_id, exc)
            return

        discussion_id = payload.discussion_id
        if not self.rooms.contains(discussion_id, connection_id):
            logger.warning("Chat: %s sent to %s without joining", connection_id, discussion_id)
            return

        try:
            async with self._uow_factory() as uow:
                msg = await message_service.append_message(
                    discussion_id, principal, content, uow, clock=self._clock,
                )
        except Exception:
            msg = message_service.build_message(discussion_id, principal, content, self._clock)
            logger.exception(
                "Chat: durability loss, message %s in %s delivered live only",
                msg.id, discussion_id,
            )

        await self._emitter.broadcast(
            self.rooms.connection_ids(discussion_id),
            ChatEvent.NEW_MESSAGE,
            message_event(msg),
        )

    async def typing(
        self,
        connection_id: str,
        principal: Principal,
        data: Any,
        *,
        stopped: bool,
    ) -> None:
        discussion_id = _room_id(data)
        if discussion_id is None:
            logger.warning("Chat: typing without discussionId from %s", connection_id)
            return
        if not self.rooms.contains(discussion_id, connection_id):
            return
        event = ChatEvent.USER_STOPPED_TYPING if stopped else ChatEvent.USER_TYPING
        await self._emitter.broadcast(
            self.rooms.connection_ids(discussion_id, exclude=connection_id),
            event,
            {"userId": principal.user_id, "username": principal.username},
        )

    async def disconnect(self, connection_id: str) -> None:
        discussion_id = self._current.get(connection_id)
        if discussion_id is not None:
            await self._leave_room(connection_id, discussion_id)
        self._current.pop(connection_id, None)

    async def _leave_room(self, connection_id: str, discussion_id: str) -> None:
        member = self.rooms.leave(discussion_id, connection_id)
        if member is None:
            return
        if self._current.get(connection_id) == discussion_id:
            del self._current[connection_id]
        logger.info("Chat: %s left %s", member.username, discussion_id)
        await self._notify_left(discussion_id, member)

    async def _notify_left(self, discussion_id: str, member: ChatMember) -> None:
        await self._emitter.broadcast(
            self.rooms.connection_ids(discussion_id),
            ChatEvent.USER_LEFT,
            {"userId": member.user_id, "username": member.username},
        )

