from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from draw_engine.economy.points.constants import POINTS_CAP, POINTS_CAP_THRESHOLD, POINTS_UNIT_AMOUNT
from draw_engine.economy.points.errors import InvalidArgumentError


def to_amount(raw: Decimal | int | float | str) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidArgumentError("topup amount must be numeric")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgumentError(f"topup amount must be numeric, got {raw!r}") from exc
    if not amount.is_finite():
        raise InvalidArgumentError(f"topup amount must be finite, got {raw!r}")
    if amount < 0:
        raise InvalidArgumentError(f"topup amount must not be negative, got {raw!r}")
    return amount


def calculate_points(amount: Decimal) -> int:
    if amount >= POINTS_CAP_THRESHOLD:
        return POINTS_CAP
    if amount <= 0:
        return 0
    return int((amount / POINTS_UNIT_AMOUNT).to_integral_value(rounding=ROUND_FLOOR))
