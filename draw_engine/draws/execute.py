from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

import structlog

from draw_engine.core import clock
from draw_engine.core.msisdn import mask_msisdn
from draw_engine.db.models.winners import Winner
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.repo.jackpot_rollovers_repo import JackpotRolloversRepo
from draw_engine.db.repo.winners_repo import WinnersRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.audit import ExecutionLog
from draw_engine.draws.constants import (
    CLAIM_STATUS_PENDING,
    DRAW_STATUS_COMPLETED,
    DRAW_STATUS_EXECUTING,
    DRAW_STATUS_FAILED,
    DRAW_STATUS_SCHEDULED,
    FAILURE_REASON_TIMEOUT,
    JACKPOT_VALIDATION_INVALID_NOT_OPTED_IN,
    JACKPOT_VALIDATION_NO_PARTICIPANTS,
    JACKPOT_VALIDATION_VALID,
    ROLLOVER_REASON_INVALID_NOT_OPTED_IN,
)
from draw_engine.draws.draw_config import DRAW_EXECUTE_TIMEOUT_SECONDS
from draw_engine.draws.errors import (
    AlreadyRunningError,
    DrawNotFoundError,
    DrawTimeoutError,
    FatalDrawError,
)
from draw_engine.draws.participants import (
    is_blacklisted,
    is_jackpot_pick_valid,
    load_participant_pools,
)
from draw_engine.draws.selection import WeightedPool
from draw_engine.draws.time import fallback_rollover_destination, get_eligibility_window
from draw_engine.draws.types import (
    DrawSnapshot,
    EligibilityWindow,
    Participant,
    ParticipantPools,
    PrizeTier,
)

logger = structlog.get_logger("draw_engine.draws.execute")


@dataclass(frozen=True, slots=True)
class _ClaimedDraw:
    draw_id: int
    draw_date: date
    draw_type: str
    eligible_digits: tuple[int, ...]
    prize_tiers: tuple[PrizeTier, ...]
    calculated_jackpot: Decimal
    execution_log: tuple[dict, ...]


@dataclass(frozen=True, slots=True)
class _AwardedPrize:
    participant: Participant
    tier: PrizeTier
    amount: Decimal


async def _claim_draw(*, draw_id: int, started_at: datetime) -> _ClaimedDraw:
    async with SessionLocal.begin() as session:
        draw = await DrawsRepo.get_by_id(session, draw_id)
        if draw is None:
            raise DrawNotFoundError(f"draw {draw_id} does not exist")
        if draw.status != DRAW_STATUS_SCHEDULED:
            raise AlreadyRunningError(f"draw {draw_id} is {draw.status}")
        claimed = await DrawsRepo.transition_status(
            session,
            draw_id=draw_id,
            from_status=DRAW_STATUS_SCHEDULED,
            to_status=DRAW_STATUS_EXECUTING,
            values={"execution_started_at": started_at, "updated_at": started_at},
        )
        if not claimed:
            raise AlreadyRunningError(f"draw {draw_id} was claimed by another executor")
        snapshot = DrawSnapshot.from_model(draw)
    return _ClaimedDraw(
        draw_id=snapshot.draw_id,
        draw_date=snapshot.draw_date,
        draw_type=snapshot.draw_type,
        eligible_digits=snapshot.eligible_digits,
        prize_tiers=snapshot.prize_tiers,
        calculated_jackpot=snapshot.calculated_jackpot,
        execution_log=snapshot.execution_log,
    )


async def _load_pools(*, claimed: _ClaimedDraw, window: EligibilityWindow) -> ParticipantPools:
    async with SessionLocal() as session:
        return await load_participant_pools(
            session,
            window=window,
            eligible_digits=claimed.eligible_digits,
        )


async def _check_blacklisted(msisdn: str) -> bool:
    async def _read() -> bool:
        async with SessionLocal() as session:
            return await is_blacklisted(session, msisdn=msisdn)

    return await run_with_store_retry(_read, name="execute_draw.blacklist_check")


async def _record_rollover(
    *,
    claimed: _ClaimedDraw,
    jackpot_msisdn: str,
    now_utc: datetime,
    audit: ExecutionLog,
) -> None:
    async def _write() -> tuple[date, int | None, bool]:
        async with SessionLocal.begin() as session:
            next_draw = await DrawsRepo.find_next_scheduled(session, after_date=claimed.draw_date)
            if next_draw is not None:
                destination_date = next_draw.draw_date
                destination_id: int | None = int(next_draw.id)
            else:
                destination_date = fallback_rollover_destination(
                    source_date=claimed.draw_date,
                    source_type=claimed.draw_type,
                )
                destination_draw = await DrawsRepo.get_by_date(session, destination_date)
                destination_id = int(destination_draw.id) if destination_draw is not None else None
            rollover, created = await JackpotRolloversRepo.create_if_absent(
                session,
                source_draw_id=claimed.draw_id,
                source_draw_date=claimed.draw_date,
                amount=claimed.calculated_jackpot,
                destination_draw_date=destination_date,
                destination_draw_id=destination_id,
                reason=ROLLOVER_REASON_INVALID_NOT_OPTED_IN,
                created_at=now_utc,
            )
            updated = await DrawsRepo.update_executing(
                session,
                draw_id=claimed.draw_id,
                values={
                    "jackpot_winner_msisdn": jackpot_msisdn,
                    "jackpot_validation_status": JACKPOT_VALIDATION_INVALID_NOT_OPTED_IN,
                    "rollover_executed": True,
                    "updated_at": now_utc,
                },
            )
            if not updated:
                raise FatalDrawError(f"draw {claimed.draw_id} left EXECUTING during rollover")
            return rollover.destination_draw_date, rollover.destination_draw_id, created

    destination_date, destination_id, created = await run_with_store_retry(
        _write,
        name="execute_draw.rollover",
    )
    audit.append(
        "jackpot_rolled_over" if created else "jackpot_rollover_already_recorded",
        amount=claimed.calculated_jackpot,
        destination_draw_date=destination_date,
        destination_draw_id=destination_id,
        reason=ROLLOVER_REASON_INVALID_NOT_OPTED_IN,
    )
    logger.info(
        "draw_jackpot_rolled_over",
        draw_id=claimed.draw_id,
        amount=str(claimed.calculated_jackpot),
        destination_draw_date=destination_date.isoformat(),
        created=created,
    )


async def _pick_consolation_winners(
    *,
    claimed: _ClaimedDraw,
    consolation_pool: tuple[Participant, ...],
    excluded: set[str],
    rng: random.Random,
    audit: ExecutionLog,
) -> list[_AwardedPrize]:
    working = WeightedPool(consolation_pool, excluded=excluded)
    awarded: list[_AwardedPrize] = []
    for tier in claimed.prize_tiers:
        if tier.is_jackpot:
            continue
        tier_awarded = 0
        while tier_awarded < tier.count:
            candidate = working.pick(rng)
            if candidate is None:
                break
            if await _check_blacklisted(candidate.msisdn):
                audit.append(
                    "consolation_candidate_blacklisted",
                    category=tier.category,
                    msisdn=mask_msisdn(candidate.msisdn),
                )
                continue
            awarded.append(_AwardedPrize(participant=candidate, tier=tier, amount=tier.amount))
            tier_awarded += 1
        if tier_awarded < tier.count:
            audit.append(
                "consolation_pool_exhausted",
                category=tier.category,
                requested=tier.count,
                awarded=tier_awarded,
            )
            logger.warning(
                "draw_consolation_pool_exhausted",
                draw_id=claimed.draw_id,
                category=tier.category,
                requested=tier.count,
                awarded=tier_awarded,
            )
        else:
            audit.append("consolation_tier_awarded", category=tier.category, awarded=tier_awarded)
    return awarded


async def _persist_and_complete(
    *,
    claimed: _ClaimedDraw,
    prizes: list[_AwardedPrize],
    values: dict,
    audit: ExecutionLog,
) -> DrawSnapshot:
    finished_at = clock.now_utc()
    audit.append("winners_recorded", total=len(prizes))
    audit.append("execution_completed")

    async def _write() -> DrawSnapshot:
        async with SessionLocal.begin() as session:
            await WinnersRepo.create_many(
                session,
                winners=[
                    Winner(
                        draw_id=claimed.draw_id,
                        user_id=prize.participant.user_id,
                        msisdn=prize.participant.msisdn,
                        prize_category=prize.tier.category,
                        prize_amount=prize.amount,
                        win_date=claimed.draw_date,
                        claim_status=CLAIM_STATUS_PENDING,
                        notes=None,
                        claimed_at=None,
                        created_at=finished_at,
                        updated_at=finished_at,
                    )
                    for prize in prizes
                ],
            )
            completed = await DrawsRepo.transition_status(
                session,
                draw_id=claimed.draw_id,
                from_status=DRAW_STATUS_EXECUTING,
                to_status=DRAW_STATUS_COMPLETED,
                values={
                    **values,
                    "total_winners": len(prizes),
                    "execution_ended_at": finished_at,
                    "execution_log": audit.entries(),
                    "updated_at": finished_at,
                },
            )
            if not completed:
                raise FatalDrawError(f"draw {claimed.draw_id} left EXECUTING before completion")
            draw = await DrawsRepo.get_by_id(session, claimed.draw_id)
            if draw is None:
                raise FatalDrawError(f"draw {claimed.draw_id} disappeared during completion")
            return DrawSnapshot.from_model(draw)

    return await run_with_store_retry(_write, name="execute_draw.complete")


async def _run_draw(
    *,
    claimed: _ClaimedDraw,
    seed: int,
    audit: ExecutionLog,
) -> DrawSnapshot:
    window = get_eligibility_window(draw_date=claimed.draw_date, draw_type=claimed.draw_type)
    rng = clock.build_rng(seed)
    audit.append(
        "rng_seeded",
        seed=str(seed),
        window_start=window.start_utc,
        window_cutoff=window.cutoff_utc,
    )

    pools = await run_with_store_retry(
        lambda: _load_pools(claimed=claimed, window=window),
        name="execute_draw.load_pools",
    )
    audit.append(
        "pools_loaded",
        pool_a_size=len(pools.jackpot_pool),
        pool_b_size=len(pools.consolation_pool),
    )
    values: dict = {
        "rng_seed": str(seed),
        "pool_a_size": len(pools.jackpot_pool),
        "pool_b_size": len(pools.consolation_pool),
    }

    prizes: list[_AwardedPrize] = []
    excluded: set[str] = set()
    jackpot_tier = next((tier for tier in claimed.prize_tiers if tier.is_jackpot), None)
    if jackpot_tier is None:
        raise FatalDrawError(f"draw {claimed.draw_id} has no jackpot tier in its prize snapshot")

    jackpot_pick = WeightedPool(pools.jackpot_pool).pick(rng)
    if jackpot_pick is None:
        validation_status = JACKPOT_VALIDATION_NO_PARTICIPANTS
        audit.append("jackpot_no_participants")
    else:
        excluded.add(jackpot_pick.msisdn)
        is_valid = is_jackpot_pick_valid(jackpot_pick, window=window)
        validation_status = (
            JACKPOT_VALIDATION_VALID if is_valid else JACKPOT_VALIDATION_INVALID_NOT_OPTED_IN
        )
        audit.append(
            "jackpot_picked",
            msisdn=mask_msisdn(jackpot_pick.msisdn),
            points=jackpot_pick.points,
            validation_status=validation_status,
        )
        values["jackpot_winner_msisdn"] = jackpot_pick.msisdn
        if is_valid:
            prizes.append(
                _AwardedPrize(
                    participant=jackpot_pick,
                    tier=jackpot_tier,
                    amount=claimed.calculated_jackpot,
                )
            )
        else:
            await _record_rollover(
                claimed=claimed,
                jackpot_msisdn=jackpot_pick.msisdn,
                now_utc=clock.now_utc(),
                audit=audit,
            )
            values["rollover_executed"] = True
    values["jackpot_validation_status"] = validation_status

    prizes.extend(
        await _pick_consolation_winners(
            claimed=claimed,
            consolation_pool=pools.consolation_pool,
            excluded=excluded,
            rng=rng,
            audit=audit,
        )
    )
    return await _persist_and_complete(claimed=claimed, prizes=prizes, values=values, audit=audit)


async def _mark_failed(*, claimed: _ClaimedDraw, error_message: str, audit: ExecutionLog) -> None:
    failed_at = clock.now_utc()

    async def _write() -> bool:
        async with SessionLocal.begin() as session:
            return await DrawsRepo.transition_status(
                session,
                draw_id=claimed.draw_id,
                from_status=DRAW_STATUS_EXECUTING,
                to_status=DRAW_STATUS_FAILED,
                values={
                    "error_message": error_message,
                    "execution_ended_at": failed_at,
                    "execution_log": audit.entries(),
                    "updated_at": failed_at,
                },
            )

    failed = await run_with_store_retry(_write, name="execute_draw.mark_failed")
    if not failed:
        logger.warning("draw_mark_failed_skipped", draw_id=claimed.draw_id)


async def execute_draw(
    *,
    draw_id: int,
    seed: int | None = None,
    timeout_seconds: float | None = None,
) -> DrawSnapshot:
    """Run a SCHEDULED draw to COMPLETED or FAILED.

    Losing the SCHEDULED -> EXECUTING compare-and-set raises AlreadyRunningError
    without writing anything. Cancelling the calling task leaves the draw in
    EXECUTING; winners already written are not rolled back.
    """
    budget = DRAW_EXECUTE_TIMEOUT_SECONDS if timeout_seconds is None else float(timeout_seconds)
    started_ns = clock.wall_clock_ns()
    started_at = clock.from_wall_clock_ns(started_ns)

    claimed = await run_with_store_retry(
        lambda: _claim_draw(draw_id=draw_id, started_at=started_at),
        name="execute_draw.claim",
    )
    resolved_seed = (
        int(seed)
        if seed is not None
        else clock.derive_draw_seed(draw_id=claimed.draw_id, started_ns=started_ns)
    )
    audit = ExecutionLog(claimed.execution_log)
    audit.append("execution_started", started_at=started_at, timeout_seconds=budget)
    logger.info(
        "draw_execute_started",
        draw_id=claimed.draw_id,
        draw_date=claimed.draw_date.isoformat(),
        draw_type=claimed.draw_type,
        seed=str(resolved_seed),
    )
    monotonic_start = clock.monotonic()

    try:
        snapshot = await asyncio.wait_for(
            _run_draw(claimed=claimed, seed=resolved_seed, audit=audit),
            timeout=budget,
        )
    except asyncio.TimeoutError as exc:
        audit.append("execution_timed_out", budget_seconds=budget)
        await _mark_failed(claimed=claimed, error_message=FAILURE_REASON_TIMEOUT, audit=audit)
        logger.error("draw_execute_timed_out", draw_id=claimed.draw_id, budget_seconds=budget)
        raise DrawTimeoutError(f"draw {claimed.draw_id} exceeded {budget:g}s") from exc
    except Exception as exc:
        fatal = exc if isinstance(exc, FatalDrawError) else FatalDrawError(f"{type(exc).__name__}: {exc}")
        audit.append("execution_failed", error=str(fatal))
        await _mark_failed(claimed=claimed, error_message=str(fatal), audit=audit)
        logger.exception("draw_execute_failed", draw_id=claimed.draw_id, error=str(fatal))
        if fatal is exc:
            raise
        raise fatal from exc

    logger.info(
        "draw_execute_completed",
        draw_id=snapshot.draw_id,
        jackpot_validation_status=snapshot.jackpot_validation_status,
        jackpot_winner=mask_msisdn(snapshot.jackpot_winner_msisdn),
        total_winners=snapshot.total_winners,
        rollover_executed=snapshot.rollover_executed,
        elapsed_ms=int((clock.monotonic() - monotonic_start) * 1000),
    )
    return snapshot

