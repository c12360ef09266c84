from __future__ import annotations

from typing import TYPE_CHECKING

from draw_engine.core.errors import (
    DrawEngineError,
    InvalidArgumentError,
    NotFoundError,
    TransientStoreError,
)

if TYPE_CHECKING:
    from draw_engine.draws.types import DrawSnapshot

__all__ = [
    "AlreadyRunningError",
    "AlreadyScheduledError",
    "ConfigMissingError",
    "ConfigNotFoundError",
    "DrawEngineError",
    "DrawNotFoundError",
    "DrawTimeoutError",
    "FatalDrawError",
    "InvalidArgumentError",
    "NotFoundError",
    "TransientStoreError",
    "WinnerNotFoundError",
]


class DrawNotFoundError(NotFoundError):
    pass


class WinnerNotFoundError(NotFoundError):
    pass


class ConfigNotFoundError(NotFoundError):
    pass


class ConfigMissingError(DrawEngineError):
    pass


class AlreadyScheduledError(DrawEngineError):
    def __init__(self, draw: DrawSnapshot) -> None:
        super().__init__(f"draw already scheduled for {draw.draw_date.isoformat()}")
        self.draw = draw


class AlreadyRunningError(DrawEngineError):
    pass


class FatalDrawError(DrawEngineError):
    pass


class DrawTimeoutError(FatalDrawError):
    pass
