"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Iterable

from fastapi import WebSocket

from discussion_service.domain.value_objects.ids import ConnectionId
from discussion_service.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


def new_connection_id() -> ConnectionId:
    return ConnectionId(secrets.token_urlsafe(15))


class ConnectionManager:
    """Addresses the live sockets of one endpoint by connection id.

    A connection id is the signaling address peers use to reach each other.
    Sending to an id that is no longer connected is a no-op.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._connections: dict[str, WebSocket] = {}

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, ws: WebSocket) -> ConnectionId:
        await ws.accept()
        connection_id = new_connection_id()
        self._connections[connection_id] = ws
        logger.debug("WS %s connected: %s (total=%d)", self.name, connection_id, len(self._connections))
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            logger.debug("WS %s disconnected: %s", self.name, connection_id)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    async def send(self, connection_id: str, event_type: str, data: Any) -> None:
        ws = self._connections.get(connection_id)
        if ws is None:
            logger.debug("WS %s drop %s: %s not connected", self.name, event_type, connection_id)
            return
        raw = WsOutbound(type=str(event_type), data=data).model_dump_json()
        try:
            await ws.send_text(raw)
        except Exception:
            logger.debug("WS %s send failed to %s", self.name, connection_id, exc_info=True)
            self.disconnect(connection_id)

    async def broadcast(
        self,
        connection_ids: Iterable[str],
        event_type: str,
        data: Any,
    ) -> None:
        """Send one event to several connections; a dead socket never stops the rest."""
        raw = WsOutbound(type=str(event_type), data=data).model_dump_json()
        dead: list[str] = []
        for connection_id in list(connection_ids):
            ws = self._connections.get(connection_id)
            if ws is None:
                continue
            try:
                await ws.send_text(raw)
            except Exception:
                dead.append(connection_id)
        for connection_id in dead:
            self.disconnect(connection_id)
