from __future__ import annotations

from datetime import date, datetime

import pytest

from draw_engine.draws.errors import TransientStoreError
from draw_engine.draws.queries import get_draw_by_date, list_draws_in_range
from draw_engine.draws.schedule import schedule_draw
from draw_engine.workers.tasks import draws_async
from draw_engine.workers.tasks.draws_async import (
    execute_due_draws_async,
    schedule_upcoming_draw_async,
)
from tests.integration.draw_fixtures import (
    UTC,
    add_topups,
    configure_draws,
    participant_msisdn,
    seed_participants,
)

MONDAY = date(2025, 6, 2)
TUESDAY = date(2025, 6, 3)
WEDNESDAY = date(2025, 6, 4)


@pytest.mark.asyncio
async def test_schedule_upcoming_draws_is_idempotent() -> None:
    await configure_draws()
    just_after_midnight = datetime(2025, 6, 2, 23, 30, tzinfo=UTC)

    first = await schedule_upcoming_draw_async(now_utc=just_after_midnight)
    second = await schedule_upcoming_draw_async(now_utc=just_after_midnight)

    assert first["local_date"] == "2025-06-03"
    assert first["scheduled_total"] == 2
    assert second["scheduled_total"] == 0
    assert second["existing_total"] == 2
    draws = await list_draws_in_range(start_date=TUESDAY, end_date=WEDNESDAY)
    assert [draw.draw_type for draw in draws] == ["DAILY", "DAILY"]


@pytest.mark.asyncio
async def test_schedule_upcoming_skips_sunday() -> None:
    await configure_draws()
    saturday_morning = datetime(2025, 6, 7, 6, 0, tzinfo=UTC)

    result = await schedule_upcoming_draw_async(now_utc=saturday_morning)

    assert result["scheduled_total"] == 2
    assert (await get_draw_by_date(draw_date=date(2025, 6, 7))).draw_type == "WEEKLY"
    assert (await get_draw_by_date(draw_date=date(2025, 6, 9))).draw_type == "DAILY"


@pytest.mark.asyncio
async def test_schedule_upcoming_reports_missing_config() -> None:
    result = await schedule_upcoming_draw_async(now_utc=datetime(2025, 6, 2, 23, 30, tzinfo=UTC))

    assert result["scheduled_total"] == 0
    assert result["config_missing_total"] == 2


@pytest.mark.asyncio
async def test_execute_due_draws_runs_draws_dated_today_or_earlier() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY, count=12)
    await schedule_upcoming_draw_async(now_utc=datetime(2025, 6, 2, 23, 30, tzinfo=UTC))

    result = await execute_due_draws_async(now_utc=datetime(2025, 6, 3, 17, 10, tzinfo=UTC))

    assert result["due_total"] == 1
    assert result["completed_total"] == 1
    assert (await get_draw_by_date(draw_date=TUESDAY)).status == "COMPLETED"
    assert (await get_draw_by_date(draw_date=WEDNESDAY)).status == "SCHEDULED"

    rerun = await execute_due_draws_async(now_utc=datetime(2025, 6, 3, 17, 20, tzinfo=UTC))
    assert rerun["due_total"] == 0


@pytest.mark.asyncio
async def test_execute_due_draws_leaves_todays_draw_until_cutoff() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY, count=12)
    await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")

    morning = await execute_due_draws_async(now_utc=datetime(2025, 6, 3, 8, 0, tzinfo=UTC))

    assert morning["due_on_or_before"] == "2025-06-02"
    assert morning["due_total"] == 0
    assert (await get_draw_by_date(draw_date=TUESDAY)).status == "SCHEDULED"

    at_cutoff = await execute_due_draws_async(now_utc=datetime(2025, 6, 3, 17, 0, tzinfo=UTC))

    assert at_cutoff["due_total"] == 1
    assert at_cutoff["completed_total"] == 1
    assert (await get_draw_by_date(draw_date=TUESDAY)).status == "COMPLETED"


@pytest.mark.asyncio
async def test_execute_due_draws_continues_after_store_error(monkeypatch) -> None:
    await configure_draws()
    await seed_participants(topup_day=MONDAY, count=12)
    await add_topups(msisdns=[participant_msisdn(index) for index in range(1, 13)], topup_day=TUESDAY)
    monday = await schedule_draw(draw_date=MONDAY, draw_type="DAILY")
    tuesday = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")

    real_execute_draw = draws_async.execute_draw
    calls: list[int] = []

    async def flaky_execute_draw(*, draw_id: int):
        calls.append(draw_id)
        if draw_id == monday.draw_id:
            raise TransientStoreError("execute_draw.claim failed after 3 attempts")
        return await real_execute_draw(draw_id=draw_id)

    monkeypatch.setattr(draws_async, "execute_draw", flaky_execute_draw)

    result = await execute_due_draws_async(now_utc=datetime(2025, 6, 3, 17, 10, tzinfo=UTC))

    assert calls == [monday.draw_id, tuesday.draw_id]
    assert result["due_total"] == 2
    assert result["failed_total"] == 1
    assert result["completed_total"] == 1
    assert (await get_draw_by_date(draw_date=MONDAY)).status == "SCHEDULED"
    assert (await get_draw_by_date(draw_date=TUESDAY)).status == "COMPLETED"
