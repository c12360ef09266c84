from celery.schedules import crontab

from draw_engine.workers.celery_app import celery_app
from draw_engine.workers.tasks import draws  # noqa: F401
from draw_engine.workers.tasks.draws_config import (
    DRAW_EXECUTE_HOUR,
    DRAW_EXECUTE_MINUTE,
    DRAW_SCHEDULE_HOUR,
    DRAW_SCHEDULE_MINUTE,
)


def test_draw_beat_entries_are_registered() -> None:
    schedule = celery_app.conf.beat_schedule

    assert schedule["draws-schedule-upcoming"]["task"] == "draw_engine.workers.tasks.draws.schedule_upcoming_draw"
    assert schedule["draws-schedule-upcoming"]["schedule"] == crontab(
        hour=DRAW_SCHEDULE_HOUR,
        minute=DRAW_SCHEDULE_MINUTE,
    )
    assert schedule["draws-execute-due"]["task"] == "draw_engine.workers.tasks.draws.execute_due_draws"
    assert schedule["draws-execute-due"]["schedule"] == crontab(
        hour=DRAW_EXECUTE_HOUR,
        minute=DRAW_EXECUTE_MINUTE,
    )


def test_default_times_follow_cutoff() -> None:
    assert (DRAW_SCHEDULE_HOUR, DRAW_SCHEDULE_MINUTE) == (0, 5)
    assert (DRAW_EXECUTE_HOUR, DRAW_EXECUTE_MINUTE) == (18, 5)
    assert celery_app.conf.timezone == "Africa/Lagos"
