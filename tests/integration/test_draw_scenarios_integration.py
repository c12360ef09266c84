from __future__ import annotations

import asyncio
from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from draw_engine.core.clock import build_rng
from draw_engine.db.models.jackpot_rollovers import JackpotRollover
from draw_engine.db.models.point_transactions import PointTransaction
from draw_engine.db.models.users import User
from draw_engine.db.session import SessionLocal
from draw_engine.draws.errors import AlreadyRunningError
from draw_engine.draws.execute import execute_draw
from draw_engine.draws.participants import load_participant_pools
from draw_engine.draws.queries import get_winners_by_draw_id
from draw_engine.draws.schedule import schedule_draw
from draw_engine.draws.selection import WeightedPool
from draw_engine.draws.time import get_eligibility_window
from draw_engine.economy.points.service import allocate_points
from tests.integration.draw_fixtures import (
    OPT_IN_AT,
    UTC,
    add_topups,
    configure_draws,
    participant_msisdn,
    seed_participants,
    set_opt_in,
)

TUESDAY = date(2025, 6, 3)
WEDNESDAY = date(2025, 6, 4)
SATURDAY = date(2025, 6, 7)


async def _rollovers() -> list[JackpotRollover]:
    async with SessionLocal() as session:
        result = await session.execute(select(JackpotRollover).order_by(JackpotRollover.id.asc()))
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_daily_draw_with_valid_jackpot_awards_ten_distinct_winners() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY)
    all_msisdns = {participant_msisdn(index) for index in range(1, 101)}

    scheduled = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    assert scheduled.status == "SCHEDULED"
    assert scheduled.eligible_digits == (2, 3)
    assert scheduled.calculated_jackpot == Decimal("1000000")

    result = await execute_draw(draw_id=scheduled.draw_id, seed=42)

    assert result.status == "COMPLETED"
    assert result.jackpot_validation_status == "VALID"
    assert result.rollover_executed is False
    assert result.total_winners == 10
    assert result.pool_a_size == 100
    assert result.pool_b_size == 100
    assert result.rng_seed == 42

    winners = await get_winners_by_draw_id(draw_id=scheduled.draw_id)
    msisdns = [winner.msisdn for winner in winners]
    assert len(winners) == 10
    assert len(set(msisdns)) == 10
    assert set(msisdns) <= all_msisdns

    jackpot_winners = [winner for winner in winners if winner.prize_category.upper() == "JACKPOT"]
    assert len(jackpot_winners) == 1
    assert jackpot_winners[0].msisdn == result.jackpot_winner_msisdn
    assert jackpot_winners[0].prize_amount == Decimal("1000000")
    assert sorted(winner.prize_category for winner in winners).count("CONSOLATION") == 7
    assert await _rollovers() == []


@pytest.mark.asyncio
async def test_same_seed_replays_the_same_winners() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY)
    window = get_eligibility_window(draw_date=TUESDAY, draw_type="DAILY")
    async with SessionLocal() as session:
        pools = await load_participant_pools(session, window=window, eligible_digits=(2, 3))
    expected_jackpot = WeightedPool(pools.jackpot_pool).pick(build_rng(42))
    assert expected_jackpot is not None

    scheduled = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    result = await execute_draw(draw_id=scheduled.draw_id, seed=42)

    assert result.jackpot_winner_msisdn == expected_jackpot.msisdn


@pytest.mark.asyncio
async def test_jackpot_rolls_over_when_selected_user_is_not_opted_in() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY)

    window = get_eligibility_window(draw_date=TUESDAY, draw_type="DAILY")
    async with SessionLocal() as session:
        pools = await load_participant_pools(session, window=window, eligible_digits=(2, 3))
    jackpot_pick = WeightedPool(pools.jackpot_pool).pick(build_rng(42))
    assert jackpot_pick is not None
    await set_opt_in(jackpot_pick.msisdn, opt_in=False)

    today = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    next_draw = await schedule_draw(draw_date=WEDNESDAY, draw_type="DAILY")

    result = await execute_draw(draw_id=today.draw_id, seed=42)

    assert result.status == "COMPLETED"
    assert result.jackpot_validation_status == "INVALID_NOT_OPTED_IN"
    assert result.jackpot_winner_msisdn == jackpot_pick.msisdn
    assert result.rollover_executed is True
    assert result.pool_b_size == 99

    rollovers = await _rollovers()
    assert len(rollovers) == 1
    assert rollovers[0].source_draw_id == today.draw_id
    assert rollovers[0].amount == Decimal("1000000")
    assert rollovers[0].destination_draw_date == WEDNESDAY
    assert rollovers[0].destination_draw_id == next_draw.draw_id

    winners = await get_winners_by_draw_id(draw_id=today.draw_id)
    assert len(winners) == 9
    assert all(winner.prize_category.upper() != "JACKPOT" for winner in winners)
    assert jackpot_pick.msisdn not in {winner.msisdn for winner in winners}


@pytest.mark.asyncio
async def test_two_daily_rollovers_accumulate_into_saturday_jackpot() -> None:
    await configure_draws(weekly_base="3000000")
    ids = await seed_participants(topup_day=TUESDAY, count=20, opted_in=False)
    assert len(ids) == 20

    tuesday = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    tuesday_result = await execute_draw(draw_id=tuesday.draw_id, seed=7)
    assert tuesday_result.jackpot_validation_status == "INVALID_NOT_OPTED_IN"
    assert tuesday_result.total_winners == 0

    await add_topups(
        msisdns=[participant_msisdn(index) for index in range(1, 21)],
        topup_day=WEDNESDAY,
    )
    wednesday = await schedule_draw(draw_date=WEDNESDAY, draw_type="DAILY")
    wednesday_result = await execute_draw(draw_id=wednesday.draw_id, seed=8)
    assert wednesday_result.jackpot_validation_status == "INVALID_NOT_OPTED_IN"

    rollovers = await _rollovers()
    assert [rollover.destination_draw_date for rollover in rollovers] == [SATURDAY, SATURDAY]
    assert all(rollover.destination_draw_id is None for rollover in rollovers)

    saturday = await schedule_draw(draw_date=SATURDAY, draw_type="WEEKLY")

    assert saturday.draw_type == "WEEKLY"
    assert saturday.base_jackpot == Decimal("3000000")
    assert saturday.incoming_rollover == Decimal("2000000")
    assert saturday.calculated_jackpot == Decimal("5000000")
    linked = await _rollovers()
    assert all(rollover.destination_draw_id == saturday.draw_id for rollover in linked)


@pytest.mark.asyncio
async def test_empty_jackpot_pool_completes_without_winners() -> None:
    await configure_draws()

    scheduled = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")
    result = await execute_draw(draw_id=scheduled.draw_id, seed=1)

    assert result.status == "COMPLETED"
    assert result.jackpot_validation_status == "NO_PARTICIPANTS"
    assert result.total_winners == 0
    assert result.rollover_executed is False
    assert result.jackpot_winner_msisdn is None
    assert await get_winners_by_draw_id(draw_id=scheduled.draw_id) == []
    assert await _rollovers() == []


@pytest.mark.asyncio
async def test_concurrent_execute_has_exactly_one_winner_set() -> None:
    await configure_draws()
    await seed_participants(topup_day=TUESDAY)
    scheduled = await schedule_draw(draw_date=TUESDAY, draw_type="DAILY")

    results = await asyncio.gather(
        execute_draw(draw_id=scheduled.draw_id, seed=42),
        execute_draw(draw_id=scheduled.draw_id, seed=43),
        return_exceptions=True,
    )

    completed = [item for item in results if not isinstance(item, BaseException)]
    rejected = [item for item in results if isinstance(item, AlreadyRunningError)]
    assert len(completed) == 1
    assert len(rejected) == 1
    assert completed[0].status == "COMPLETED"

    winners = await get_winners_by_draw_id(draw_id=scheduled.draw_id)
    assert len(winners) == 10


@pytest.mark.asyncio
async def test_concurrent_point_allocations_keep_ledger_consistent() -> None:
    async with SessionLocal.begin() as session:
        user = User(
            msisdn="2348031234567",
            opt_in=True,
            opt_in_at=OPT_IN_AT,
            is_blacklisted=False,
            points=0,
            created_at=OPT_IN_AT,
            updated_at=OPT_IN_AT,
        )
        session.add(user)
        await session.flush()
        user_id = int(user.id)

    topup_at = datetime(2025, 6, 3, 9, 0, tzinfo=UTC)
    awarded = await asyncio.gather(
        *(allocate_points(user_id=user_id, amount=500, topup_at=topup_at) for _ in range(1000))
    )

    assert awarded == [5] * 1000
    async with SessionLocal() as session:
        points = await session.scalar(select(User.points).where(User.id == user_id))
        transactions = await session.scalar(
            select(func.count(PointTransaction.id)).where(PointTransaction.user_id == user_id)
        )
    assert points == 5000
    assert transactions == 1000
