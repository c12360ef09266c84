from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.core import clock
from draw_engine.db.models.draws import Draw
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.repo.jackpot_rollovers_repo import JackpotRolloversRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.audit import ExecutionLog
from draw_engine.draws.config_store import read_base_jackpot, read_prize_structure
from draw_engine.draws.constants import DRAW_STATUS_SCHEDULED, JACKPOT_VALIDATION_PENDING
from draw_engine.draws.errors import AlreadyScheduledError, ConfigMissingError, ConfigNotFoundError
from draw_engine.draws.rules import normalize_draw_type, resolve_eligible_digits, validate_draw_date
from draw_engine.draws.types import DrawSnapshot

logger = structlog.get_logger("draw_engine.draws.schedule")


async def sum_incoming_rollovers(session: AsyncSession, *, draw_date: date) -> Decimal:
    rollovers = await JackpotRolloversRepo.list_by_destination_date(session, draw_date)
    return sum((Decimal(rollover.amount) for rollover in rollovers), Decimal("0"))


async def schedule_draw_in_session(
    session: AsyncSession,
    *,
    draw_date: date,
    draw_type: str,
    eligible_digits: tuple[int, ...],
    use_default_digits: bool,
    now_utc: datetime,
) -> DrawSnapshot:
    existing = await DrawsRepo.get_by_date(session, draw_date)
    if existing is not None:
        raise AlreadyScheduledError(DrawSnapshot.from_model(existing))

    try:
        prize_structure = await read_prize_structure(session, draw_type=draw_type)
        base_jackpot = await read_base_jackpot(session, draw_type=draw_type)
    except ConfigNotFoundError as exc:
        raise ConfigMissingError(str(exc)) from exc

    incoming = await sum_incoming_rollovers(session, draw_date=draw_date)
    calculated = base_jackpot.amount + incoming

    audit = ExecutionLog()
    audit.append(
        "draw_scheduled",
        draw_type=draw_type,
        eligible_digits=eligible_digits,
        base_jackpot=base_jackpot.amount,
        incoming_rollover=incoming,
        calculated_jackpot=calculated,
    )
    draw = await DrawsRepo.create(
        session,
        draw=Draw(
            draw_date=draw_date,
            draw_type=draw_type,
            eligible_digits=list(eligible_digits),
            use_default_digits=use_default_digits,
            status=DRAW_STATUS_SCHEDULED,
            prize_tiers=[tier.to_config() for tier in prize_structure.tiers],
            base_jackpot=base_jackpot.amount,
            incoming_rollover=incoming,
            calculated_jackpot=calculated,
            jackpot_winner_msisdn=None,
            jackpot_validation_status=JACKPOT_VALIDATION_PENDING,
            rollover_executed=False,
            execution_log=audit.entries(),
            pool_a_size=0,
            pool_b_size=0,
            total_winners=0,
            created_at=now_utc,
            updated_at=now_utc,
        ),
    )
    await JackpotRolloversRepo.link_destination(
        session,
        destination_draw_date=draw_date,
        destination_draw_id=int(draw.id),
    )
    return DrawSnapshot.from_model(draw)


async def _load_existing(draw_date: date) -> DrawSnapshot | None:
    async with SessionLocal() as session:
        draw = await DrawsRepo.get_by_date(session, draw_date)
        return None if draw is None else DrawSnapshot.from_model(draw)


async def schedule_draw(
    *,
    draw_date: date,
    draw_type: str,
    eligible_digits: Iterable[int] | None = None,
    use_default_digits: bool = True,
    now_utc: datetime | None = None,
) -> DrawSnapshot:
    resolved_date = validate_draw_date(draw_date)
    resolved_type = normalize_draw_type(draw_type)
    digits = resolve_eligible_digits(
        draw_date=resolved_date,
        eligible_digits=eligible_digits,
        use_default_digits=use_default_digits,
    )
    resolved_now = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> DrawSnapshot:
        async with SessionLocal.begin() as session:
            return await schedule_draw_in_session(
                session,
                draw_date=resolved_date,
                draw_type=resolved_type,
                eligible_digits=digits,
                use_default_digits=bool(use_default_digits),
                now_utc=resolved_now,
            )

    try:
        snapshot = await run_with_store_retry(_attempt, name="schedule_draw")
    except AlreadyScheduledError as exc:
        logger.info(
            "draw_schedule_skipped_existing",
            draw_date=resolved_date.isoformat(),
            draw_id=exc.draw.draw_id,
            status=exc.draw.status,
        )
        raise
    except IntegrityError:
        existing = await run_with_store_retry(
            lambda: _load_existing(resolved_date),
            name="schedule_draw.load_existing",
        )
        if existing is None:
            raise
        logger.info(
            "draw_schedule_lost_race",
            draw_date=resolved_date.isoformat(),
            draw_id=existing.draw_id,
        )
        raise AlreadyScheduledError(existing) from None

    logger.info(
        "draw_scheduled",
        draw_id=snapshot.draw_id,
        draw_date=snapshot.draw_date.isoformat(),
        draw_type=snapshot.draw_type,
        eligible_digits=list(snapshot.eligible_digits),
        calculated_jackpot=str(snapshot.calculated_jackpot),
    )
    return snapshot
