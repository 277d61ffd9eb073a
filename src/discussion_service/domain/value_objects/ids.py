from __future__ import annotations

from typing import NewType
from uuid import UUID

DiscussionId = NewType("DiscussionId", str)
ConnectionId = NewType("ConnectionId", str)
MessageId = NewType("MessageId", UUID)
UserId = NewType("UserId", str)
