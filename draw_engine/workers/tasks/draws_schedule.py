from __future__ import annotations

from celery.schedules import crontab

from draw_engine.workers.tasks.draws_config import (
    DRAW_EXECUTE_HOUR,
    DRAW_EXECUTE_MINUTE,
    DRAW_SCHEDULE_HOUR,
    DRAW_SCHEDULE_MINUTE,
)


def configure_draws_schedule(celery_app) -> None:
    celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
    celery_app.conf.beat_schedule.update(
        {
            "draws-schedule-upcoming": {
                "task": "draw_engine.workers.tasks.draws.schedule_upcoming_draw",
                "schedule": crontab(hour=DRAW_SCHEDULE_HOUR, minute=DRAW_SCHEDULE_MINUTE),
                "options": {"queue": "q_normal"},
            },
            "draws-execute-due": {
                "task": "draw_engine.workers.tasks.draws.execute_due_draws",
                "schedule": crontab(hour=DRAW_EXECUTE_HOUR, minute=DRAW_EXECUTE_MINUTE),
                "options": {"queue": "q_high"},
            },
        }
    )
