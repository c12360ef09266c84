from __future__ import annotations

from datetime import date, datetime

import pytest

from draw_engine.draws.errors import InvalidArgumentError, WinnerNotFoundError
from draw_engine.draws.execute import execute_draw
from draw_engine.draws.queries import (
    get_winners_by_draw_id,
    list_winners_by_msisdn,
    update_winner_claim_status,
)
from draw_engine.draws.schedule import schedule_draw
from tests.integration.draw_fixtures import UTC, configure_draws, seed_participants

TUESDAY = date(2025, 6, 3)
PAID_AT = datetime(2025, 6, 4, 10, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_claim_status_lifecycle() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY, count=15)
    draw = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    await execute_draw(draw_id=draw.draw_id, seed=21)
    winner = (await get_winners_by_draw_id(draw_id=draw.draw_id))[0]
    assert winner.claim_status == "PENDING"

    processing = await update_winner_claim_status(winner_id=winner.winner_id, claim_status="processing")
    assert processing.claim_status == "PROCESSING"
    assert processing.claimed_at is None

    paid = await update_winner_claim_status(
        winner_id=winner.winner_id,
        claim_status="PAID",
        notes="bank transfer",
        now_utc=PAID_AT,
    )
    assert paid.claim_status == "PAID"
    assert paid.claimed_at == PAID_AT
    assert paid.notes == "bank transfer"

    by_msisdn = await list_winners_by_msisdn(msisdn=winner.msisdn)
    assert [item.winner_id for item in by_msisdn] == [winner.winner_id]


@pytest.mark.asyncio
async def test_claim_status_rejects_unknown_values() -> None:
    with pytest.raises(InvalidArgumentError):
        await update_winner_claim_status(winner_id=1, claim_status="LOST")
    with pytest.raises(WinnerNotFoundError):
        await update_winner_claim_status(winner_id=12345, claim_status="PAID")
