from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.blacklist_entries import BlacklistEntry
from draw_engine.db.models.topups import Topup
from draw_engine.db.models.users import User


def _topped_up_in_window(*, window_start: datetime, window_cutoff: datetime):
    return select(Topup.msisdn).where(
        Topup.topup_at >= window_start,
        Topup.topup_at < window_cutoff,
    )


class ParticipantsRepo:
    @staticmethod
    async def list_jackpot_pool(
        session: AsyncSession,
        *,
        window_start: datetime,
        window_cutoff: datetime,
    ) -> list[User]:
        stmt = (
            select(User)
            .where(
                User.msisdn.in_(
                    _topped_up_in_window(window_start=window_start, window_cutoff=window_cutoff)
                )
            )
            .order_by(User.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_consolation_pool(
        session: AsyncSession,
        *,
        window_start: datetime,
        window_cutoff: datetime,
        eligible_digits: Collection[int],
    ) -> list[User]:
        digits = sorted({int(digit) for digit in eligible_digits})
        if not digits:
            return []
        blacklisted = exists().where(BlacklistEntry.msisdn == User.msisdn)
        stmt = (
            select(User)
            .where(
                User.msisdn.in_(
                    _topped_up_in_window(window_start=window_start, window_cutoff=window_cutoff)
                ),
                User.opt_in.is_(True),
                User.opt_in_at.is_not(None),
                User.opt_in_at < window_cutoff,
                or_(*(User.msisdn.like(f"%{digit}") for digit in digits)),
                ~blacklisted,
            )
            .order_by(User.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
