"""WebSocket message envelope and payload models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WsInbound(BaseModel):
    """Client → Server."""

    type: str  # joinDiscussion | sendMessage | join-discussion | offer | ping ...
    data: Any = None


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str  # newMessage | userJoined | participants | offer | error | pong ...
    data: Any = None


class SendMessagePayload(BaseModel):
    discussion_id: str = Field(alias="discussionId", min_length=1)
    content: str


class AudioRoomPayload(BaseModel):
    discussion_id: str = Field(alias="discussionId", min_length=1)


class SpeakingPayload(BaseModel):
    discussion_id: str = Field(alias="discussionId", min_length=1)
    is_speaking: bool = Field(alias="isSpeaking")


class SignalPayload(BaseModel):
    """Offer / answer / ICE envelope. Everything but ``to`` is opaque."""

    model_config = ConfigDict(extra="allow")

    to: str = Field(min_length=1)

    def opaque(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
