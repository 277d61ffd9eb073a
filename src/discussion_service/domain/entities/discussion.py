from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from discussion_service.domain.value_objects.enums import DiscussionStatus


@dataclass(frozen=True, slots=True)
class Discussion:
    """Read-only view of a discussion owned by the forum API."""

    id: str
    title: str
    host_id: str
    community_id: str
    status: str
    is_private: bool
    start_time: datetime
    participant_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_ended(self) -> bool:
        return self.status == DiscussionStatus.ENDED

    def admits(self, user_id: str) -> bool:
        return user_id == self.host_id or user_id in self.participant_ids
