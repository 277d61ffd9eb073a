from __future__ import annotations

import pytest

from discussion_service.scripts import seed_dev_data
from tests.conftest import FakeUoW, make_discussion


class RecordingSession:
    def __init__(self) -> None:
        self.added: list[object] = []

    def add(self, obj: object) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        pass


@pytest.mark.asyncio
async def test_first_run_creates_discussion_and_history():
    uow = FakeUoW()
    session = RecordingSession()

    added = await seed_dev_data.seed_history(uow, session)

    assert added == len(seed_dev_data.SAMPLE_MESSAGES)
    assert [m.discussion_id for m in uow.messages._messages] == [seed_dev_data.DISCUSSION_ID] * added
    assert len(session.added) == 1
    assert session.added[0].id == seed_dev_data.DISCUSSION_ID


@pytest.mark.asyncio
async def test_rerun_does_not_duplicate_history():
    uow = FakeUoW()
    await seed_dev_data.seed_history(uow, RecordingSession())
    uow.discussions.add(make_discussion(seed_dev_data.DISCUSSION_ID))
    session = RecordingSession()

    added = await seed_dev_data.seed_history(uow, session)

    assert added == 0
    assert session.added == []
    assert len(uow.messages._messages) == len(seed_dev_data.SAMPLE_MESSAGES)
