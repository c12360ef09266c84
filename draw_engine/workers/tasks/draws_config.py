from __future__ import annotations

from draw_engine.core.config import get_settings
from draw_engine.draws.draw_config import DRAW_CUTOFF_HOUR, DRAW_CUTOFF_MINUTE, parse_hhmm
from draw_engine.draws.constants import DUE_DRAWS_BATCH_SIZE

settings = get_settings()

DRAW_SCHEDULE_HOUR, DRAW_SCHEDULE_MINUTE = parse_hhmm(
    settings.draw_schedule_at,
    default_hour=0,
    default_minute=5,
)
DRAW_EXECUTE_HOUR, DRAW_EXECUTE_MINUTE = parse_hhmm(
    settings.draw_execute_at,
    default_hour=DRAW_CUTOFF_HOUR,
    default_minute=min(59, DRAW_CUTOFF_MINUTE + 5),
)
DRAW_EXECUTE_BATCH_SIZE = max(1, int(DUE_DRAWS_BATCH_SIZE))

__all__ = [
    "DRAW_EXECUTE_BATCH_SIZE",
    "DRAW_EXECUTE_HOUR",
    "DRAW_EXECUTE_MINUTE",
    "DRAW_SCHEDULE_HOUR",
    "DRAW_SCHEDULE_MINUTE",
]
