from __future__ import annotations

from typing import Any, Iterable, Protocol


class EventEmitter(Protocol):
    """Delivers events to connections of one WebSocket endpoint by address."""

    def is_connected(self, connection_id: str) -> bool: ...

    async def send(self, connection_id: str, event_type: str, data: Any) -> None:
        """Deliver to one connection. Unknown addresses are a no-op."""
        ...

    async def broadcast(
        self, connection_ids: Iterable[str], event_type: str, data: Any,
    ) -> None: ...
