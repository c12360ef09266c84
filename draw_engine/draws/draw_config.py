from __future__ import annotations

from draw_engine.core.config import get_settings

settings = get_settings()


def parse_hhmm(value: str, *, default_hour: int, default_minute: int) -> tuple[int, int]:
    try:
        hour_raw, minute_raw = value.strip().split(":", maxsplit=1)
        hour = int(hour_raw)
        minute = int(minute_raw)
    except (AttributeError, ValueError):
        return default_hour, default_minute
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return default_hour, default_minute
    return hour, minute


DRAW_TIMEZONE = settings.draw_timezone.strip() or "Africa/Lagos"
DRAW_COUNTRY_CODE = settings.draw_country_code.strip() or "234"
DRAW_EXECUTE_TIMEOUT_SECONDS = max(1.0, float(settings.draw_execute_timeout_seconds))

DRAW_CUTOFF_HOUR, DRAW_CUTOFF_MINUTE = parse_hhmm(
    settings.draw_cutoff_time,
    default_hour=18,
    default_minute=0,
)

__all__ = [
    "DRAW_COUNTRY_CODE",
    "DRAW_CUTOFF_HOUR",
    "DRAW_CUTOFF_MINUTE",
    "DRAW_EXECUTE_TIMEOUT_SECONDS",
    "DRAW_TIMEZONE",
    "parse_hhmm",
]
