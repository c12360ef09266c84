from __future__ import annotations

from datetime import date, datetime

import structlog

from draw_engine.core import clock
from draw_engine.core.msisdn import canonicalize_msisdn, mask_msisdn
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.repo.winners_repo import WinnersRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.config_store import read_base_jackpot, read_prize_structure
from draw_engine.draws.constants import CLAIM_STATUS_PAID, CLAIM_STATUSES
from draw_engine.draws.draw_config import DRAW_COUNTRY_CODE
from draw_engine.draws.errors import (
    ConfigNotFoundError,
    DrawNotFoundError,
    InvalidArgumentError,
    WinnerNotFoundError,
)
from draw_engine.draws.rules import default_digits_for_weekday, recommended_draw_type
from draw_engine.draws.schedule import sum_incoming_rollovers
from draw_engine.draws.types import DrawConfigPreview, DrawSnapshot, WinnerSnapshot

logger = structlog.get_logger("draw_engine.draws.queries")


async def get_draw_by_id(*, draw_id: int) -> DrawSnapshot:
    async def _read() -> DrawSnapshot:
        async with SessionLocal() as session:
            draw = await DrawsRepo.get_by_id(session, draw_id)
            if draw is None:
                raise DrawNotFoundError(f"draw {draw_id} does not exist")
            return DrawSnapshot.from_model(draw)

    return await run_with_store_retry(_read, name="get_draw_by_id")


async def get_draw_by_date(*, draw_date: date) -> DrawSnapshot:
    async def _read() -> DrawSnapshot:
        async with SessionLocal() as session:
            draw = await DrawsRepo.get_by_date(session, draw_date)
            if draw is None:
                raise DrawNotFoundError(f"no draw on {draw_date.isoformat()}")
            return DrawSnapshot.from_model(draw)

    return await run_with_store_retry(_read, name="get_draw_by_date")


async def list_draws_in_range(*, start_date: date, end_date: date) -> list[DrawSnapshot]:
    if end_date < start_date:
        raise InvalidArgumentError("end date must not be before start date")

    async def _read() -> list[DrawSnapshot]:
        async with SessionLocal() as session:
            draws = await DrawsRepo.list_by_date_range(
                session,
                start_date=start_date,
                end_date=end_date,
            )
            return [DrawSnapshot.from_model(draw) for draw in draws]

    return await run_with_store_retry(_read, name="list_draws_in_range")


async def get_winners_by_draw_id(*, draw_id: int) -> list[WinnerSnapshot]:
    async def _read() -> list[WinnerSnapshot]:
        async with SessionLocal() as session:
            draw = await DrawsRepo.get_by_id(session, draw_id)
            if draw is None:
                raise DrawNotFoundError(f"draw {draw_id} does not exist")
            winners = await WinnersRepo.list_by_draw_id(session, draw_id)
            return [WinnerSnapshot.from_model(winner) for winner in winners]

    return await run_with_store_retry(_read, name="get_winners_by_draw_id")


async def list_winners_by_msisdn(*, msisdn: str, limit: int = 50) -> list[WinnerSnapshot]:
    canonical = canonicalize_msisdn(msisdn, country_code=DRAW_COUNTRY_CODE)

    async def _read() -> list[WinnerSnapshot]:
        async with SessionLocal() as session:
            winners = await WinnersRepo.list_by_msisdn(session, msisdn=canonical, limit=limit)
            return [WinnerSnapshot.from_model(winner) for winner in winners]

    return await run_with_store_retry(_read, name="list_winners_by_msisdn")


async def update_winner_claim_status(
    *,
    winner_id: int,
    claim_status: str,
    notes: str | None = None,
    now_utc: datetime | None = None,
) -> WinnerSnapshot:
    resolved_status = str(claim_status or "").strip().upper()
    if resolved_status not in CLAIM_STATUSES:
        raise InvalidArgumentError(f"unsupported claim status: {claim_status!r}")
    updated_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _write() -> WinnerSnapshot:
        async with SessionLocal.begin() as session:
            winner = await WinnersRepo.get_by_id(session, winner_id)
            if winner is None:
                raise WinnerNotFoundError(f"winner {winner_id} does not exist")
            winner.claim_status = resolved_status
            if notes is not None:
                winner.notes = notes
            if resolved_status == CLAIM_STATUS_PAID and winner.claimed_at is None:
                winner.claimed_at = updated_at
            winner.updated_at = updated_at
            await session.flush()
            return WinnerSnapshot.from_model(winner)

    snapshot = await run_with_store_retry(_write, name="update_winner_claim_status")
    logger.info(
        "winner_claim_status_updated",
        winner_id=snapshot.winner_id,
        draw_id=snapshot.draw_id,
        msisdn=mask_msisdn(snapshot.msisdn),
        claim_status=snapshot.claim_status,
    )
    return snapshot


def get_default_digits_for_day(weekday: int) -> tuple[int, ...]:
    return default_digits_for_weekday(weekday)


async def get_draw_config(*, draw_date: date) -> DrawConfigPreview:
    draw_type = recommended_draw_type(draw_date)

    async def _read() -> DrawConfigPreview:
        async with SessionLocal() as session:
            try:
                prize_tiers = (await read_prize_structure(session, draw_type=draw_type)).tiers
            except ConfigNotFoundError:
                prize_tiers = ()
            try:
                base_amount = (await read_base_jackpot(session, draw_type=draw_type)).amount
            except ConfigNotFoundError:
                base_amount = None
            incoming = await sum_incoming_rollovers(session, draw_date=draw_date)
            existing = await DrawsRepo.get_by_date(session, draw_date)
            return DrawConfigPreview(
                draw_date=draw_date,
                recommended_draw_type=draw_type,
                recommended_digits=default_digits_for_weekday(draw_date.weekday()),
                prize_tiers=prize_tiers,
                base_jackpot=base_amount,
                incoming_rollover=incoming,
                projected_jackpot=None if base_amount is None else base_amount + incoming,
                existing_draw=None if existing is None else DrawSnapshot.from_model(existing),
            )

    return await run_with_store_retry(_read, name="get_draw_config")
