from __future__ import annotations

import pytest

from draw_engine.core.errors import InvalidArgumentError
from draw_engine.core.msisdn import canonicalize_msisdn, mask_msisdn


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0803123456", "234803123456"),
        ("+234 803-123-4567", "2348031234567"),
        ("(080) 312 3456", "234803123456"),
        ("08031234567", "08031234567"),
        ("2348031234567", "2348031234567"),
    ],
)
def test_canonicalize_msisdn(raw: str, expected: str) -> None:
    assert canonicalize_msisdn(raw) == expected


def test_canonicalize_msisdn_uses_given_country_code() -> None:
    assert canonicalize_msisdn("0712345678", country_code="44") == "44712345678"


@pytest.mark.parametrize("raw", ["", "   ", "+-()", None])
def test_canonicalize_msisdn_rejects_values_without_digits(raw) -> None:
    with pytest.raises(InvalidArgumentError):
        canonicalize_msisdn(raw)


def test_mask_msisdn() -> None:
    assert mask_msisdn("2348031234567") == "234803***4567"
    assert mask_msisdn("1234567") == "1234567"
    assert mask_msisdn(None) == ""
