from __future__ import annotations

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.core.clock import ensure_utc
from draw_engine.core.msisdn import mask_msisdn
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.repo.jackpot_rollovers_repo import JackpotRolloversRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.config_store import read_base_jackpot
from draw_engine.draws.constants import (
    DRAW_STATUS_COMPLETED,
    DRAW_STATUS_SCHEDULED,
    DRAW_TYPE_WEEKLY,
    JACKPOT_HISTORY_MAX_LIMIT,
    JACKPOT_VALIDATION_VALID,
)
from draw_engine.draws.errors import ConfigMissingError, ConfigNotFoundError
from draw_engine.draws.types import JackpotHistoryEntry, JackpotStatus


async def compute_jackpot_status(session: AsyncSession) -> JackpotStatus:
    latest = await DrawsRepo.find_latest_by_type_and_statuses(
        session,
        draw_type=DRAW_TYPE_WEEKLY,
        statuses=(DRAW_STATUS_COMPLETED, DRAW_STATUS_SCHEDULED),
    )
    if latest is not None:
        current = Decimal(latest.calculated_jackpot)
        last_updated_at = ensure_utc(latest.updated_at)
        effective_date = latest.draw_date
    else:
        try:
            base = await read_base_jackpot(session, draw_type=DRAW_TYPE_WEEKLY)
        except ConfigNotFoundError as exc:
            raise ConfigMissingError(str(exc)) from exc
        current = base.amount
        last_updated_at = base.updated_at
        effective_date = None

    pending = await JackpotRolloversRepo.list_pending(session, effective_date=effective_date)
    pending_total = sum((Decimal(rollover.amount) for rollover in pending), Decimal("0"))
    for rollover in pending:
        created_at = ensure_utc(rollover.created_at)
        if last_updated_at is None or created_at > last_updated_at:
            last_updated_at = created_at

    return JackpotStatus(
        current_amount=current + pending_total,
        reference_draw_id=int(latest.id) if latest is not None else None,
        reference_draw_date=latest.draw_date if latest is not None else None,
        pending_rollover_total=pending_total,
        last_updated_at=last_updated_at,
    )


async def get_jackpot_status() -> JackpotStatus:
    async def _read() -> JackpotStatus:
        async with SessionLocal() as session:
            return await compute_jackpot_status(session)

    return await run_with_store_retry(_read, name="get_jackpot_status")


async def get_jackpot_history(*, limit: int = 10) -> list[JackpotHistoryEntry]:
    resolved_limit = min(max(1, int(limit)), JACKPOT_HISTORY_MAX_LIMIT)

    async def _read() -> list[JackpotHistoryEntry]:
        async with SessionLocal() as session:
            draws = await DrawsRepo.list_latest_by_status(
                session,
                status=DRAW_STATUS_COMPLETED,
                limit=resolved_limit,
            )
        entries: list[JackpotHistoryEntry] = []
        for draw in draws:
            won = draw.jackpot_validation_status == JACKPOT_VALIDATION_VALID
            entries.append(
                JackpotHistoryEntry(
                    draw_id=int(draw.id),
                    draw_date=draw.draw_date,
                    draw_type=draw.draw_type,
                    jackpot_amount=Decimal(draw.calculated_jackpot),
                    jackpot_validation_status=draw.jackpot_validation_status,
                    won=won,
                    winner_msisdn_masked=(
                        mask_msisdn(draw.jackpot_winner_msisdn)
                        if won and draw.jackpot_winner_msisdn
                        else None
                    ),
                    rollover_executed=bool(draw.rollover_executed),
                )
            )
        return entries

    return await run_with_store_retry(_read, name="get_jackpot_history")
