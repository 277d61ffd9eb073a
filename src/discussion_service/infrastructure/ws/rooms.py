"""In-memory room membership.

One registry instance per real-time endpoint, created by the app factory and
handed to the gateway/relay. Rooms are dropped as soon as they become empty.
Every method is synchronous, so a caller never suspends halfway through a
read-modify-write.
"""
from __future__ import annotations

import logging
from typing import Generic, TypeVar

from discussion_service.domain.value_objects.ids import ConnectionId, DiscussionId

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RoomRegistry(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._rooms: dict[DiscussionId, dict[ConnectionId, T]] = {}

    def join(self, room: str, connection_id: str, member: T) -> bool:
        """Add or refresh a member. Returns False if it was already present."""
        members = self._rooms.setdefault(DiscussionId(room), {})
        is_new = connection_id not in members
        members[ConnectionId(connection_id)] = member
        if is_new:
            logger.debug("%s room %s: +%s (size=%d)", self.name, room, connection_id, len(members))
        return is_new

    def leave(self, room: str, connection_id: str) -> T | None:
        """Remove a member; unknown room or connection is a no-op."""
        members = self._rooms.get(DiscussionId(room))
        if members is None:
            return None
        member = members.pop(ConnectionId(connection_id), None)
        if not members:
            del self._rooms[DiscussionId(room)]
            logger.debug("%s room %s pruned", self.name, room)
        return member

    def contains(self, room: str, connection_id: str) -> bool:
        return connection_id in self._rooms.get(DiscussionId(room), {})

    def has_room(self, room: str) -> bool:
        return room in self._rooms

    def members(self, room: str) -> list[T]:
        return list(self._rooms.get(DiscussionId(room), {}).values())

    def connection_ids(self, room: str, *, exclude: str | None = None) -> list[str]:
        return [cid for cid in self._rooms.get(DiscussionId(room), {}) if cid != exclude]

    def size(self, room: str) -> int:
        return len(self._rooms.get(DiscussionId(room), {}))

    def rooms_of(self, connection_id: str) -> list[str]:
        return [room for room, members in self._rooms.items() if connection_id in members]

    def rooms(self) -> list[str]:
        return list(self._rooms)
