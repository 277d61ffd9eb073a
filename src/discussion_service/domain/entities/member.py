from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ChatMember:
    connection_id: str
    user_id: str
    username: str


@dataclass(frozen=True, slots=True)
class AudioParticipant:
    user_id: str
    username: str
    connection_id: str
