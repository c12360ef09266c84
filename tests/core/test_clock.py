from __future__ import annotations

from datetime import datetime, timedelta, timezone

from draw_engine.core.clock import build_rng, derive_draw_seed, ensure_utc, from_wall_clock_ns


def test_ensure_utc_treats_naive_values_as_utc() -> None:
    naive = datetime(2025, 6, 3, 9, 0)
    lagos = datetime(2025, 6, 3, 10, 0, tzinfo=timezone(timedelta(hours=1)))

    assert ensure_utc(naive) == datetime(2025, 6, 3, 9, 0, tzinfo=timezone.utc)
    assert ensure_utc(lagos).hour == 9
    assert ensure_utc(lagos).tzinfo == timezone.utc


def test_draw_seed_is_stable_for_same_inputs() -> None:
    seed = derive_draw_seed(draw_id=7, started_ns=1_700_000_000_000_000_000)

    assert seed == derive_draw_seed(draw_id=7, started_ns=1_700_000_000_000_000_000)
    assert seed != derive_draw_seed(draw_id=8, started_ns=1_700_000_000_000_000_000)
    assert 0 <= seed < 2**64


def test_build_rng_replays_sequence() -> None:
    assert [build_rng(42).random() for _ in range(3)] == [build_rng(42).random() for _ in range(3)]
    first, second = build_rng(42), build_rng(42)
    assert [first.randrange(100) for _ in range(5)] == [second.randrange(100) for _ in range(5)]


def test_from_wall_clock_ns_is_utc() -> None:
    value = from_wall_clock_ns(0)
    assert value == datetime(1970, 1, 1, tzinfo=timezone.utc)
