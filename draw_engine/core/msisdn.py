from __future__ import annotations

import re

from draw_engine.core.errors import InvalidArgumentError

DEFAULT_COUNTRY_CODE = "234"
_NON_DIGITS_RE = re.compile(r"[^0-9]")


def canonicalize_msisdn(raw: str, *, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    digits = _NON_DIGITS_RE.sub("", str(raw or ""))
    if len(digits) == 10 and digits.startswith("0"):
        digits = f"{country_code}{digits[1:]}"
    if not digits:
        raise InvalidArgumentError(f"msisdn has no digits: {raw!r}")
    return digits


def mask_msisdn(msisdn: str | None) -> str:
    if not msisdn:
        return ""
    if len(msisdn) <= 7:
        return msisdn
    return f"{msisdn[:6]}***{msisdn[-4:]}"
