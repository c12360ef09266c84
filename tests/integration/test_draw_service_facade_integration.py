from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from draw_engine.draws.service_facade import DrawServiceFacade
from draw_engine.subscribers.service import register_user
from tests.integration.draw_fixtures import DAILY_PRIZE_TIERS, UTC, seed_participants

TUESDAY = date(2025, 6, 3)


@pytest.mark.asyncio
async def test_facade_drives_a_full_daily_draw() -> None:
    await DrawServiceFacade.update_prize_structure(draw_type="DAILY", tiers=DAILY_PRIZE_TIERS)
    await DrawServiceFacade.update_base_jackpot(draw_type="DAILY", amount="1000000")
    await DrawServiceFacade.update_base_jackpot(draw_type="WEEKLY", amount="3000000")
    await seed_participants(topup_day=TUESDAY, count=12)

    structure = await DrawServiceFacade.get_prize_structure(draw_type="DAILY")
    assert structure.jackpot_tier.amount == Decimal("1000000")
    assert (await DrawServiceFacade.get_base_jackpot(draw_type="SATURDAY")).amount == Decimal("3000000")
    assert DrawServiceFacade.get_default_digits_for_day(TUESDAY.weekday()) == (2, 3)

    draw = await DrawServiceFacade.schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    result = await DrawServiceFacade.execute_draw(draw_id=draw.draw_id, seed=42)

    assert result.status == "COMPLETED"
    assert (await DrawServiceFacade.get_draw_by_date(draw_date=TUESDAY)).draw_id == draw.draw_id
    assert len(await DrawServiceFacade.get_winners_by_draw_id(draw_id=draw.draw_id)) == result.total_winners
    history = await DrawServiceFacade.get_jackpot_history()
    assert [entry.draw_id for entry in history] == [draw.draw_id]
    status = await DrawServiceFacade.get_jackpot_status()
    assert status.current_amount == Decimal("3000000")


@pytest.mark.asyncio
async def test_facade_points_paths() -> None:
    user = await register_user(msisdn="234803000111")
    topup_at = datetime(2025, 6, 3, 9, 0, tzinfo=UTC)

    assert await DrawServiceFacade.allocate_points(user_id=user.user_id, amount=300, topup_at=topup_at) == 3
    topup = await DrawServiceFacade.process_topup(
        msisdn="234803000111",
        amount="1500",
        topup_at=topup_at,
        transaction_ref="FACADE-1",
    )
    assert topup.points_earned == 10
