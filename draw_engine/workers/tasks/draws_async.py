from __future__ import annotations

from datetime import date, datetime, timedelta

import structlog

from draw_engine.core import clock
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.constants import SUNDAY_WEEKDAY
from draw_engine.draws.errors import (
    AlreadyRunningError,
    AlreadyScheduledError,
    ConfigMissingError,
    FatalDrawError,
    NotFoundError,
    TransientStoreError,
)
from draw_engine.draws.execute import execute_draw
from draw_engine.draws.rules import recommended_draw_type
from draw_engine.draws.schedule import schedule_draw
from draw_engine.draws.time import latest_due_draw_date, local_date
from draw_engine.workers.tasks.draws_config import DRAW_EXECUTE_BATCH_SIZE

logger = structlog.get_logger("draw_engine.workers.tasks.draws")


def _upcoming_draw_dates(today: date) -> list[date]:
    """Today (unless Sunday) and the next draw day after it."""
    dates = [today] if today.weekday() != SUNDAY_WEEKDAY else []
    following = today + timedelta(days=1)
    if following.weekday() == SUNDAY_WEEKDAY:
        following += timedelta(days=1)
    dates.append(following)
    return dates


async def schedule_upcoming_draw_async(*, now_utc: datetime | None = None) -> dict[str, object]:
    resolved_now = clock.ensure_utc(now_utc or clock.now_utc())
    today = local_date(resolved_now)

    scheduled_total = 0
    existing_total = 0
    config_missing_total = 0
    for draw_date in _upcoming_draw_dates(today):
        try:
            await schedule_draw(
                draw_date=draw_date,
                draw_type=recommended_draw_type(draw_date),
                now_utc=resolved_now,
            )
        except AlreadyScheduledError:
            existing_total += 1
        except ConfigMissingError as exc:
            config_missing_total += 1
            logger.warning(
                "draw_schedule_config_missing",
                draw_date=draw_date.isoformat(),
                error=str(exc),
            )
        else:
            scheduled_total += 1

    result: dict[str, object] = {
        "local_date": today.isoformat(),
        "scheduled_total": scheduled_total,
        "existing_total": existing_total,
        "config_missing_total": config_missing_total,
    }
    logger.info("draws_schedule_upcoming_finished", **result)
    return result


async def execute_draw_async(*, draw_id: int) -> dict[str, object]:
    snapshot = await execute_draw(draw_id=draw_id)
    return {
        "draw_id": snapshot.draw_id,
        "status": snapshot.status,
        "jackpot_validation_status": snapshot.jackpot_validation_status,
        "total_winners": snapshot.total_winners,
    }


async def execute_due_draws_async(
    *,
    now_utc: datetime | None = None,
    batch_size: int = DRAW_EXECUTE_BATCH_SIZE,
) -> dict[str, object]:
    resolved_now = clock.ensure_utc(now_utc or clock.now_utc())
    today = local_date(resolved_now)
    due_on_or_before = latest_due_draw_date(resolved_now)

    async def _list_due() -> list[int]:
        async with SessionLocal() as session:
            return await DrawsRepo.list_due_scheduled_ids(
                session,
                on_or_before=due_on_or_before,
                limit=max(1, int(batch_size)),
            )

    draw_ids = await run_with_store_retry(_list_due, name="execute_due_draws.list")

    completed_total = 0
    skipped_total = 0
    failed_total = 0
    for draw_id in draw_ids:
        try:
            await execute_draw(draw_id=draw_id)
        except AlreadyRunningError:
            skipped_total += 1
        except FatalDrawError:
            # execute_draw already marked the draw FAILED and logged the cause.
            failed_total += 1
        except (TransientStoreError, NotFoundError) as exc:
            failed_total += 1
            logger.warning(
                "draws_execute_due_draw_errored",
                draw_id=draw_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        else:
            completed_total += 1

    result: dict[str, object] = {
        "local_date": today.isoformat(),
        "due_on_or_before": due_on_or_before.isoformat(),
        "due_total": len(draw_ids),
        "completed_total": completed_total,
        "skipped_total": skipped_total,
        "failed_total": failed_total,
    }
    logger.info("draws_execute_due_finished", **result)
    return result
