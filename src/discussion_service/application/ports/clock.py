from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of message timestamps."""

    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock truncated to milliseconds.

    A live ``newMessage`` and the same message read back from history carry
    identical timestamps at that precision.
    """

    def now(self) -> datetime:
        moment = datetime.now(timezone.utc)
        return moment.replace(microsecond=moment.microsecond // 1000 * 1000)
