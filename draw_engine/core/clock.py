from __future__ import annotations

import hashlib
import random
import time
from datetime import datetime, timezone

UTC = timezone.utc


def now_utc() -> datetime:
    return datetime.now(UTC)


def wall_clock_ns() -> int:
    return time.time_ns()


def monotonic() -> float:
    return time.monotonic()


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC.

    Naive values are treated as UTC, which is how they come back from stores
    that drop the offset (SQLite).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def from_wall_clock_ns(value_ns: int) -> datetime:
    return datetime.fromtimestamp(value_ns / 1_000_000_000, tz=UTC)


def derive_draw_seed(*, draw_id: int, started_ns: int) -> int:
    digest = hashlib.sha256(f"{draw_id}:{started_ns}".encode("ascii")).digest()
    return int.from_bytes(digest[:8], "big")


def build_rng(seed: int) -> random.Random:
    return random.Random(seed)
