from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from draw_engine.core.clock import ensure_utc
from draw_engine.db.models.users import User


@dataclass(frozen=True, slots=True)
class SubscriberSnapshot:
    user_id: int
    msisdn: str
    opt_in: bool
    opt_in_at: datetime | None
    opt_in_channel: str | None
    opt_out_at: datetime | None
    is_blacklisted: bool
    points: int
    last_activity_at: datetime | None

    @classmethod
    def from_model(cls, user: User) -> SubscriberSnapshot:
        return cls(
            user_id=int(user.id),
            msisdn=user.msisdn,
            opt_in=bool(user.opt_in),
            opt_in_at=None if user.opt_in_at is None else ensure_utc(user.opt_in_at),
            opt_in_channel=user.opt_in_channel,
            opt_out_at=None if user.opt_out_at is None else ensure_utc(user.opt_out_at),
            is_blacklisted=bool(user.is_blacklisted),
            points=int(user.points or 0),
            last_activity_at=(
                None if user.last_activity_at is None else ensure_utc(user.last_activity_at)
            ),
        )
