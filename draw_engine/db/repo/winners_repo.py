from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.winners import Winner


class WinnersRepo:
    @staticmethod
    async def create_many(session: AsyncSession, *, winners: Sequence[Winner]) -> list[Winner]:
        if not winners:
            return []
        session.add_all(list(winners))
        await session.flush()
        return list(winners)

    @staticmethod
    async def get_by_id(session: AsyncSession, winner_id: int) -> Winner | None:
        return await session.get(Winner, winner_id)

    @staticmethod
    async def list_by_draw_id(session: AsyncSession, draw_id: int) -> list[Winner]:
        stmt = select(Winner).where(Winner.draw_id == draw_id).order_by(Winner.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_msisdn(session: AsyncSession, *, msisdn: str, limit: int) -> list[Winner]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Winner)
            .where(Winner.msisdn == msisdn)
            .order_by(Winner.win_date.desc(), Winner.id.desc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
