from __future__ import annotations

from draw_engine.workers.asyncio_runner import run_async_job
from draw_engine.workers.celery_app import celery_app
from draw_engine.workers.tasks.draws_async import (
    execute_draw_async as _execute_draw_async,
    execute_due_draws_async as _execute_due_draws_async,
    schedule_upcoming_draw_async as _schedule_upcoming_draw_async,
)
from draw_engine.workers.tasks.draws_config import DRAW_EXECUTE_BATCH_SIZE
from draw_engine.workers.tasks.draws_schedule import configure_draws_schedule

schedule_upcoming_draw_async = _schedule_upcoming_draw_async
execute_due_draws_async = _execute_due_draws_async
execute_draw_async = _execute_draw_async

__all__ = [
    "execute_draw",
    "execute_draw_async",
    "execute_due_draws",
    "execute_due_draws_async",
    "schedule_upcoming_draw",
    "schedule_upcoming_draw_async",
]


@celery_app.task(name="draw_engine.workers.tasks.draws.schedule_upcoming_draw")
def schedule_upcoming_draw() -> dict[str, object]:
    return run_async_job(schedule_upcoming_draw_async())


@celery_app.task(name="draw_engine.workers.tasks.draws.execute_due_draws")
def execute_due_draws(batch_size: int = DRAW_EXECUTE_BATCH_SIZE) -> dict[str, object]:
    return run_async_job(execute_due_draws_async(batch_size=batch_size))


@celery_app.task(name="draw_engine.workers.tasks.draws.execute_draw")
def execute_draw(draw_id: int) -> dict[str, object]:
    return run_async_job(execute_draw_async(draw_id=draw_id))


configure_draws_schedule(celery_app)
