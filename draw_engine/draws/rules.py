from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from draw_engine.core.errors import InvalidArgumentError
from draw_engine.draws.constants import (
    DRAW_TYPE_DAILY,
    DRAW_TYPE_SATURDAY_ALIAS,
    DRAW_TYPE_WEEKLY,
    SATURDAY_WEEKDAY,
    SUNDAY_WEEKDAY,
)

# Monday=0 .. Sunday=6
DEFAULT_DIGITS_BY_WEEKDAY: dict[int, tuple[int, ...]] = {
    0: (0, 1),
    1: (2, 3),
    2: (4, 5),
    3: (6, 7),
    4: (8, 9),
    5: (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    6: (),
}


def default_digits_for_weekday(weekday: int) -> tuple[int, ...]:
    if isinstance(weekday, bool) or not isinstance(weekday, int) or weekday not in DEFAULT_DIGITS_BY_WEEKDAY:
        raise InvalidArgumentError(f"weekday must be 0..6, got {weekday!r}")
    return DEFAULT_DIGITS_BY_WEEKDAY[weekday]


def normalize_draw_type(raw: str) -> str:
    value = str(raw or "").strip().upper()
    if value == DRAW_TYPE_SATURDAY_ALIAS:
        return DRAW_TYPE_WEEKLY
    if value not in (DRAW_TYPE_DAILY, DRAW_TYPE_WEEKLY):
        raise InvalidArgumentError(f"unsupported draw type: {raw!r}")
    return value


def recommended_draw_type(draw_date: date) -> str:
    return DRAW_TYPE_WEEKLY if draw_date.weekday() == SATURDAY_WEEKDAY else DRAW_TYPE_DAILY


def validate_draw_date(draw_date: date) -> date:
    if isinstance(draw_date, datetime) or not isinstance(draw_date, date):
        raise InvalidArgumentError("draw date must be a calendar date")
    if draw_date.weekday() == SUNDAY_WEEKDAY:
        raise InvalidArgumentError(f"draws are not held on Sundays: {draw_date.isoformat()}")
    return draw_date


def validate_eligible_digits(digits: Iterable[int]) -> tuple[int, ...]:
    resolved: set[int] = set()
    for digit in digits:
        if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit <= 9:
            raise InvalidArgumentError(f"eligible digit must be an integer 0..9, got {digit!r}")
        resolved.add(digit)
    if not resolved:
        raise InvalidArgumentError("at least one eligible digit is required")
    return tuple(sorted(resolved))


def resolve_eligible_digits(
    *,
    draw_date: date,
    eligible_digits: Iterable[int] | None,
    use_default_digits: bool,
) -> tuple[int, ...]:
    if use_default_digits:
        return default_digits_for_weekday(draw_date.weekday())
    if eligible_digits is None:
        raise InvalidArgumentError("eligible digits are required when defaults are disabled")
    return validate_eligible_digits(eligible_digits)
