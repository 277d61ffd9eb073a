from __future__ import annotations

from discussion_service.domain.entities.member import ChatMember
from discussion_service.infrastructure.ws.rooms import RoomRegistry


def _member(cid: str) -> ChatMember:
    return ChatMember(connection_id=cid, user_id=f"u-{cid}", username=cid)


def test_join_is_idempotent():
    rooms: RoomRegistry[ChatMember] = RoomRegistry("chat")

    assert rooms.join("d1", "c1", _member("c1")) is True
    assert rooms.join("d1", "c1", _member("c1")) is False

    assert rooms.size("d1") == 1
    assert rooms.connection_ids("d1") == ["c1"]


def test_leave_unknown_is_noop():
    rooms: RoomRegistry[ChatMember] = RoomRegistry("chat")
    rooms.join("d1", "c1", _member("c1"))

    assert rooms.leave("d1", "c2") is None
    assert rooms.leave("nope", "c1") is None
    assert rooms.size("d1") == 1


def test_room_pruned_when_empty():
    rooms: RoomRegistry[ChatMember] = RoomRegistry("chat")
    rooms.join("d1", "c1", _member("c1"))
    rooms.join("d1", "c2", _member("c2"))

    assert rooms.leave("d1", "c1") == _member("c1")
    assert rooms.has_room("d1")

    rooms.leave("d1", "c2")
    assert not rooms.has_room("d1")
    assert rooms.rooms() == []


def test_connection_ids_exclude_and_rooms_of():
    rooms: RoomRegistry[ChatMember] = RoomRegistry("audio")
    rooms.join("d1", "c1", _member("c1"))
    rooms.join("d1", "c2", _member("c2"))
    rooms.join("d2", "c1", _member("c1"))

    assert rooms.connection_ids("d1", exclude="c1") == ["c2"]
    assert sorted(rooms.rooms_of("c1")) == ["d1", "d2"]
    assert rooms.rooms_of("c3") == []
    assert rooms.contains("d2", "c1")
    assert not rooms.contains("d2", "c2")


def test_registries_are_isolated():
    a: RoomRegistry[ChatMember] = RoomRegistry("chat")
    b: RoomRegistry[ChatMember] = RoomRegistry("chat")
    a.join("d1", "c1", _member("c1"))

    assert b.members("d1") == []
