from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from draw_engine.draws.audit import ExecutionLog


def test_execution_log_serializes_fields_and_keeps_order() -> None:
    log = ExecutionLog([{"at": "2025-06-03T00:00:00+00:00", "event": "draw_scheduled"}])

    log.append(
        "pools_loaded",
        amount=Decimal("1000000.00"),
        draw_date=date(2025, 6, 3),
        cutoff=datetime(2025, 6, 3, 17, 0, tzinfo=timezone.utc),
        digits=(3, 2),
        excluded={"b", "a"},
    )

    entries = log.entries()
    assert log.events() == ["draw_scheduled", "pools_loaded"]
    assert entries[1]["amount"] == "1000000.00"
    assert entries[1]["draw_date"] == "2025-06-03"
    assert entries[1]["cutoff"] == "2025-06-03T17:00:00+00:00"
    assert entries[1]["digits"] == [3, 2]
    assert entries[1]["excluded"] == ["a", "b"]
    assert "at" in entries[1]


def test_execution_log_entries_are_copies() -> None:
    log = ExecutionLog()
    log.append("rng_seeded", seed="42")

    log.entries()[0]["event"] = "tampered"

    assert log.events() == ["rng_seeded"]
