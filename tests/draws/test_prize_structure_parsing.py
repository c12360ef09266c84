from __future__ import annotations

from decimal import Decimal

import pytest

from draw_engine.draws.config_store import parse_amount, parse_prize_tiers
from draw_engine.draws.errors import InvalidArgumentError
from draw_engine.draws.types import PrizeTier

VALID_TIERS = [
    {"category": "Jackpot", "amount": "1000000", "count": 1},
    {"category": "2ND", "amount": 350000, "count": 1},
    {"category": "CONSOLATION", "amount": "75000.50", "count": 7},
]


def test_parse_prize_tiers_keeps_order_and_types() -> None:
    tiers = parse_prize_tiers(VALID_TIERS)

    assert [tier.category for tier in tiers] == ["Jackpot", "2ND", "CONSOLATION"]
    assert tiers[0].is_jackpot is True
    assert tiers[2].amount == Decimal("75000.50")
    assert tiers[2].count == 7


def test_parse_prize_tiers_accepts_tier_objects() -> None:
    tiers = parse_prize_tiers([PrizeTier(category="JACKPOT", amount=Decimal("10"), count=1)])
    assert tiers == (PrizeTier(category="JACKPOT", amount=Decimal("10"), count=1),)


@pytest.mark.parametrize(
    "raw",
    [
        [],
        "JACKPOT",
        [{"category": "2ND", "amount": "1", "count": 1}],
        [
            {"category": "JACKPOT", "amount": "1", "count": 1},
            {"category": "jackpot", "amount": "1", "count": 1},
        ],
        [{"category": "JACKPOT", "amount": "1", "count": 2}],
        [
            {"category": "JACKPOT", "amount": "1", "count": 1},
            {"category": "2ND", "amount": "1", "count": 1},
            {"category": "2nd", "amount": "1", "count": 1},
        ],
        [{"category": "JACKPOT", "amount": "-1", "count": 1}],
        [{"category": "JACKPOT", "amount": "1", "count": 0}],
        [{"category": "", "amount": "1", "count": 1}],
    ],
)
def test_parse_prize_tiers_rejects_invalid_structures(raw) -> None:
    with pytest.raises(InvalidArgumentError):
        parse_prize_tiers(raw)


def test_parse_amount() -> None:
    assert parse_amount("3000000") == Decimal("3000000.00")
    assert parse_amount(12.5) == Decimal("12.50")
    for bad in ("-1", "abc", True, "NaN"):
        with pytest.raises(InvalidArgumentError):
            parse_amount(bad)
