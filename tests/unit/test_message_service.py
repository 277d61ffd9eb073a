from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from discussion_service.application.exceptions import ValidationError
from discussion_service.services import message_service
from tests.conftest import FakeUoW, FixedClock, make_message


def _seed(uow: FakeUoW, n: int, discussion_id: str = "d1") -> None:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(n):
        uow.messages._messages.append(
            make_message(
                discussion_id=discussion_id,
                content=f"m{i}",
                created_at=start + timedelta(seconds=i),
            )
        )


@pytest.mark.asyncio
async def test_append_uses_principal_and_clock(alice):
    uow = FakeUoW()
    clock = FixedClock()

    msg = await message_service.append_message("d1", alice, "hello", uow, clock=clock)

    assert msg.sender_id == alice.user_id
    assert msg.sender_username == alice.username
    assert msg.discussion_id == "d1"
    assert msg.created_at == clock.at
    assert uow.commits == 1
    assert uow.messages._messages == [msg]


@pytest.mark.asyncio
async def test_list_page_newest_first():
    uow = FakeUoW()
    _seed(uow, 5)

    page, total = await message_service.list_page("d1", 1, uow, page_size=2)

    assert total == 5
    assert [m.content for m in page] == ["m4", "m3"]
    assert [m.content for m in message_service.chronological(page)] == ["m3", "m4"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("n", "page", "limit"),
    [(0, 1, 50), (5, 1, 2), (5, 3, 2), (5, 4, 2), (120, 2, 50), (120, 3, 50)],
)
async def test_list_page_sizes(n, page, limit):
    uow = FakeUoW()
    _seed(uow, n)
    _seed(uow, 3, discussion_id="other")

    messages, total = await message_service.list_page("d1", page, uow, page_size=limit)

    assert len(messages) == min(limit, max(0, n - (page - 1) * limit))
    assert total == n


@pytest.mark.asyncio
async def test_list_page_rejects_bad_page():
    with pytest.raises(ValidationError):
        await message_service.list_page("d1", 0, FakeUoW())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("  hi  ", "hi"), ("x" * 2000, "x" * 2000)],
)
def test_normalize_content_accepts(raw, expected):
    assert message_service.normalize_content(raw, 2000) == expected


@pytest.mark.parametrize("raw", ["", "   ", "x" * 2001, None, 42])
def test_normalize_content_rejects(raw):
    with pytest.raises(ValidationError):
        message_service.normalize_content(raw, 2000)


def test_page_count():
    assert message_service.page_count(0, 50) == 0
    assert message_service.page_count(50, 50) == 1
    assert message_service.page_count(51, 50) == 2


def test_system_clock_is_utc_millisecond_precision():
    from discussion_service.application.ports.clock import SystemClock

    now = SystemClock().now()

    assert now.tzinfo is timezone.utc
    assert now.microsecond % 1000 == 0
