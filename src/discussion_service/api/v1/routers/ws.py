from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from discussion_service.api.deps import get_verifier
from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import AuthenticationError
from discussion_service.config import settings
from discussion_service.domain.value_objects.enums import ControlEvent
from discussion_service.infrastructure.ws.manager import ConnectionManager
from discussion_service.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

WS_AUTH_FAILED = 4001


class RoomHandler(Protocol):
    async def dispatch(
        self, connection_id: str, principal: Principal, event_type: str, data: Any,
    ) -> None: ...

    async def disconnect(self, connection_id: str) -> None: ...


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    state = websocket.app.state
    await _serve(websocket, token, state.chat_connections, state.chat_gateway)


@router.websocket("/ws/audio")
async def ws_audio(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    state = websocket.app.state
    await _serve(websocket, token, state.audio_connections, state.audio_relay)


async def _serve(
    ws: WebSocket,
    token: str | None,
    manager: ConnectionManager,
    handler: RoomHandler,
) -> None:
    # Refuse the handshake itself: no room event is read from an anonymous socket.
    try:
        principal = await get_verifier().verify(token)
    except AuthenticationError as exc:
        logger.info("WS %s auth failed: %s", manager.name, exc.detail)
        await ws.close(code=WS_AUTH_FAILED, reason=exc.detail)
        return

    connection_id = await manager.connect(ws)
    logger.info("WS %s connected: %s (%s) as %s",
                manager.name, principal.username, principal.user_id, connection_id)

    heartbeat_task = asyncio.create_task(
        _heartbeat(ws), name=f"ws-heartbeat-{manager.name}-{connection_id}",
    )
    try:
        await _read_loop(ws, manager, connection_id, principal, handler)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS %s error for %s", manager.name, connection_id)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(connection_id)
        await handler.disconnect(connection_id)
        logger.info("WS %s disconnected: %s", manager.name, principal.username)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type=ControlEvent.PONG.value, data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        pass


async def _read_loop(
    ws: WebSocket,
    manager: ConnectionManager,
    connection_id: str,
    principal: Principal,
    handler: RoomHandler,
) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except PayloadError:
            logger.warning("WS %s invalid envelope from %s", manager.name, connection_id)
            continue

        if msg.type == ControlEvent.PING:
            await manager.send(connection_id, ControlEvent.PONG, {})
        else:
            await handler.dispatch(connection_id, principal, msg.type, msg.data)
