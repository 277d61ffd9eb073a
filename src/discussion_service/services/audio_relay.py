"""WebRTC signaling for discussion audio/video.

Peers connect to each other directly (full mesh, one peer connection per pair),
so a room of n participants carries n*(n-1)/2 media links; rooms are capped by
``AUDIO_ROOM_MAX_PARTICIPANTS``. Larger rooms would need an SFU.

The relay only keeps rosters. Offers, answers and ICE candidates are routed by
connection id and never inspected.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PayloadError

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import AppError, RoomFullError
from discussion_service.application.ports.emitter import EventEmitter
from discussion_service.application.uow import UoWFactory
from discussion_service.domain.entities.member import AudioParticipant
from discussion_service.domain.value_objects.enums import AudioEvent, ControlEvent
from discussion_service.infrastructure.ws.protocol import (
    AudioRoomPayload,
    SignalPayload,
    SpeakingPayload,
)
from discussion_service.infrastructure.ws.rooms import RoomRegistry
from discussion_service.services import discussion_service

logger = logging.getLogger(__name__)

SIGNAL_EVENTS = frozenset({AudioEvent.OFFER, AudioEvent.ANSWER, AudioEvent.ICE_CANDIDATE})


def should_initiate(local: str, remote: str) -> bool:
    """True if ``local`` must send the offer to ``remote``.

    The greater connection id (plain string ordering) initiates. Both sides
    evaluate this on their own and always agree, so a pair never double-offers.
    """
    return local > remote


def participant_event(p: AudioParticipant, *, recipient: str) -> dict[str, Any]:
    return {
        "userId": p.user_id,
        "username": p.username,
        "connectionId": p.connection_id,
        "initiate": should_initiate(recipient, p.connection_id),
    }


class AudioRelay:
    """Audio side of a discussion. A connection may sit in several rooms."""

    def __init__(
        self,
        emitter: EventEmitter,
        uow_factory: UoWFactory,
        *,
        rooms: RoomRegistry[AudioParticipant] | None = None,
        max_participants: int = 50,
    ) -> None:
        self._emitter = emitter
        self._uow_factory = uow_factory
        self.rooms: RoomRegistry[AudioParticipant] = rooms or RoomRegistry("audio")
        self._max_participants = max_participants

    async def dispatch(
        self,
        connection_id: str,
        principal: Principal,
        event_type: str,
        data: Any,
    ) -> None:
        if event_type == AudioEvent.JOIN:
            await self.join(connection_id, principal, data)
        elif event_type == AudioEvent.LEAVE:
            await self.leave(connection_id, data)
        elif event_type in SIGNAL_EVENTS:
            await self.relay(connection_id, event_type, data)
        elif event_type == AudioEvent.SPEAKING:
            await self.speaking(connection_id, data)
        else:
            logger.warning("Audio: unknown event %r from %s", event_type, connection_id)

    async def join(self, connection_id: str, principal: Principal, data: Any) -> None:
        try:
            discussion_id = AudioRoomPayload.model_validate(data).discussion_id
        except PayloadError:
            logger.warning("Audio: join without discussionId from %s", connection_id)
            return

        if self.rooms.contains(discussion_id, connection_id):
            await self._send_roster(connection_id, discussion_id)
            return

        refusal: AppError | None = await discussion_service.check_join(
            discussion_id, principal, self._uow_factory,
        )
        if refusal is None and self.rooms.size(discussion_id) >= self._max_participants:
            refusal = RoomFullError(f"Room is limited to {self._max_participants} participants")
        if refusal is not None:
            logger.info("Audio: %s refused %s: %s", principal.username, discussion_id, refusal.detail)
            await self._emitter.send(
                connection_id, ControlEvent.ERROR,
                {"code": refusal.code, "detail": refusal.detail},
            )
            return

        joined = AudioParticipant(principal.user_id, principal.username, connection_id)
        self.rooms.join(discussion_id, connection_id, joined)
        logger.info("Audio: %s joined %s", principal.username, discussion_id)

        await self._send_roster(connection_id, discussion_id)
        for other in self.rooms.connection_ids(discussion_id, exclude=connection_id):
            await self._emitter.send(
                other, AudioEvent.USER_JOINED, participant_event(joined, recipient=other),
            )

    async def leave(self, connection_id: str, data: Any) -> None:
        try:
            discussion_id = AudioRoomPayload.model_validate(data).discussion_id
        except PayloadError:
            logger.warning("Audio: leave without discussionId from %s", connection_id)
            return
        await self._leave_room(connection_id, discussion_id)

    async def relay(self, connection_id: str, event_type: str, data: Any) -> None:
        try:
            signal = SignalPayload.model_validate(data)
        except PayloadError:
            logger.warning("Audio: %s without target from %s", event_type, connection_id)
            return
        if not self._emitter.is_connected(signal.to):
            logger.debug("Audio: %s from %s to gone peer %s dropped", event_type, connection_id, signal.to)
            return
        await self._emitter.send(signal.to, event_type, {**signal.opaque(), "from": connection_id})

    async def speaking(self, connection_id: str, data: Any) -> None:
        try:
            payload = SpeakingPayload.model_validate(data)
        except PayloadError:
            logger.warning("Audio: malformed speaking event from %s", connection_id)
            return
        speaker = next(
            (p for p in self.rooms.members(payload.discussion_id) if p.connection_id == connection_id),
            None,
        )
        if speaker is None:
            return
        await self._emitter.broadcast(
            self.rooms.connection_ids(payload.discussion_id, exclude=connection_id),
            AudioEvent.SPEAKING,
            {
                "connectionId": connection_id,
                "userId": speaker.user_id,
                "isSpeaking": payload.is_speaking,
            },
        )

    async def disconnect(self, connection_id: str) -> None:
        for discussion_id in self.rooms.rooms_of(connection_id):
            await self._leave_room(connection_id, discussion_id)

    async def _send_roster(self, connection_id: str, discussion_id: str) -> None:
        roster = [
            participant_event(p, recipient=connection_id)
            for p in self.rooms.members(discussion_id)
            if p.connection_id != connection_id
        ]
        await self._emitter.send(connection_id, AudioEvent.PARTICIPANTS, roster)

    async def _leave_room(self, connection_id: str, discussion_id: str) -> None:
        gone = self.rooms.leave(discussion_id, connection_id)
        if gone is None:
            return
        logger.info("Audio: %s left %s", gone.username, discussion_id)
        await self._emitter.broadcast(
            self.rooms.connection_ids(discussion_id),
            AudioEvent.USER_LEFT,
            {"connectionId": connection_id, "userId": gone.user_id},
        )
