from __future__ import annotations

import asyncio
from datetime import date

import pytest

from draw_engine.draws import execute
from draw_engine.draws.errors import DrawTimeoutError, FatalDrawError
from draw_engine.draws.queries import get_draw_by_id, get_winners_by_draw_id
from draw_engine.draws.schedule import schedule_draw
from tests.integration.draw_fixtures import configure_draws, seed_participants

TUESDAY = date(2025, 6, 3)


@pytest.mark.asyncio
async def test_execute_timeout_marks_draw_failed(monkeypatch) -> None:
    await configure_draws()
    draw = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")

    async def slow_load_pools(**kwargs):
        await asyncio.sleep(5)

    monkeypatch.setattr(execute, "_load_pools", slow_load_pools)

    with pytest.raises(DrawTimeoutError):
        await execute.execute_draw(draw_id=draw.draw_id, seed=1, timeout_seconds=0.05)

    failed = await get_draw_by_id(draw_id=draw.draw_id)
    assert failed.status == "FAILED"
    assert failed.error_message == "TIMEOUT"
    assert failed.execution_ended_at is not None
    assert "execution_timed_out" in [entry["event"] for entry in failed.execution_log]
    assert await get_winners_by_draw_id(draw_id=draw.draw_id) == []


@pytest.mark.asyncio
async def test_unexpected_error_marks_draw_failed(monkeypatch) -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY, count=10)
    draw = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")

    async def broken_pick(**kwargs):
        raise RuntimeError("winner store unavailable")

    monkeypatch.setattr(execute, "_pick_consolation_winners", broken_pick)

    with pytest.raises(FatalDrawError, match="winner store unavailable"):
        await execute.execute_draw(draw_id=draw.draw_id, seed=1)

    failed = await get_draw_by_id(draw_id=draw.draw_id)
    assert failed.status == "FAILED"
    assert "winner store unavailable" in (failed.error_message or "")
    assert await get_winners_by_draw_id(draw_id=draw.draw_id) == []
