from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from draw_engine.draws.constants import DRAW_TYPE_WEEKLY, SATURDAY_WEEKDAY, WEEKLY_WINDOW_DAYS
from draw_engine.draws.draw_config import DRAW_CUTOFF_HOUR, DRAW_CUTOFF_MINUTE, DRAW_TIMEZONE
from draw_engine.draws.types import EligibilityWindow


def draw_timezone() -> ZoneInfo:
    return ZoneInfo(DRAW_TIMEZONE)


def local_date(now_utc: datetime) -> date:
    return now_utc.astimezone(draw_timezone()).date()


def _local_to_utc(day: date, *, hour: int, minute: int, second: int = 0) -> datetime:
    local = datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=draw_timezone())
    return local.astimezone(timezone.utc)


def get_eligibility_window(*, draw_date: date, draw_type: str) -> EligibilityWindow:
    cutoff_utc = _local_to_utc(draw_date, hour=DRAW_CUTOFF_HOUR, minute=DRAW_CUTOFF_MINUTE)
    if draw_type == DRAW_TYPE_WEEKLY:
        previous = draw_date - timedelta(days=WEEKLY_WINDOW_DAYS)
        start_utc = _local_to_utc(
            previous,
            hour=DRAW_CUTOFF_HOUR,
            minute=DRAW_CUTOFF_MINUTE,
        ) + timedelta(seconds=1)
    else:
        start_utc = _local_to_utc(draw_date, hour=0, minute=0)
    return EligibilityWindow(
        draw_date=draw_date,
        draw_type=draw_type,
        start_utc=start_utc,
        cutoff_utc=cutoff_utc,
    )


def upcoming_saturday(after: date) -> date:
    days = SATURDAY_WEEKDAY - after.weekday()
    if days <= 0:
        days += 7
    return after + timedelta(days=days)


def fallback_rollover_destination(*, source_date: date, source_type: str) -> date:
    if source_type == DRAW_TYPE_WEEKLY:
        return source_date + timedelta(days=WEEKLY_WINDOW_DAYS)
    return upcoming_saturday(source_date)


def latest_due_draw_date(now_utc: datetime) -> date:
    """Today once the local cutoff has passed, otherwise yesterday."""
    now_local = now_utc.astimezone(draw_timezone())
    cutoff_local = now_local.replace(
        hour=DRAW_CUTOFF_HOUR,
        minute=DRAW_CUTOFF_MINUTE,
        second=0,
        microsecond=0,
    )
    if now_local >= cutoff_local:
        return now_local.date()
    return now_local.date() - timedelta(days=1)
