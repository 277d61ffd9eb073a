from __future__ import annotations

from enum import StrEnum


class DiscussionStatus(StrEnum):
    ACTIVE = "active"
    SCHEDULED = "scheduled"
    ENDED = "ended"


class ChatEvent(StrEnum):
    # client -> server
    JOIN = "joinDiscussion"
    LEAVE = "leaveDiscussion"
    SEND = "sendMessage"
    TYPING = "typing"
    STOP_TYPING = "stopTyping"
    # server -> client
    USER_JOINED = "userJoined"
    USER_LEFT = "userLeft"
    NEW_MESSAGE = "newMessage"
    USER_TYPING = "userTyping"
    USER_STOPPED_TYPING = "userStoppedTyping"


class AudioEvent(StrEnum):
    # client -> server
    JOIN = "join-discussion"
    LEAVE = "leave-discussion"
    OFFER = "offer"
    ANSWER = "answer"
    ICE_CANDIDATE = "ice-candidate"
    SPEAKING = "speaking"
    # server -> client
    PARTICIPANTS = "participants"
    USER_JOINED = "user-joined"
    USER_LEFT = "user-left"


class ControlEvent(StrEnum):
    PING = "ping"
    PONG = "pong"
    ERROR = "error"
