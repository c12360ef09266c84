from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any

from draw_engine.core import clock


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return clock.ensure_utc(value).isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else value
        return [_jsonable(item) for item in items]
    return value


class ExecutionLog:
    """Ordered audit trail persisted on the draw row."""

    def __init__(self, entries: Iterable[dict[str, Any]] = ()) -> None:
        self._entries: list[dict[str, Any]] = [dict(entry) for entry in entries]

    def append(self, event: str, **fields: Any) -> None:
        entry: dict[str, Any] = {"at": clock.now_utc().isoformat(), "event": event}
        entry.update({key: _jsonable(value) for key, value in fields.items()})
        self._entries.append(entry)

    def entries(self) -> list[dict[str, Any]]:
        return [dict(entry) for entry in self._entries]

    def events(self) -> list[str]:
        return [str(entry["event"]) for entry in self._entries]
