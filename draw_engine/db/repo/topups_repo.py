from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.topups import Topup


class TopupsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, topup: Topup) -> Topup:
        session.add(topup)
        await session.flush()
        return topup

    @staticmethod
    async def get_by_msisdn_and_ref(
        session: AsyncSession,
        *,
        msisdn: str,
        transaction_ref: str,
    ) -> Topup | None:
        stmt = select(Topup).where(
            Topup.msisdn == msisdn,
            Topup.transaction_ref == transaction_ref,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
