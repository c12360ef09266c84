from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.point_transactions import PointTransaction


class PointTransactionsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: PointTransaction) -> PointTransaction:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def sum_points_for_user(session: AsyncSession, user_id: int) -> int:
        stmt = select(func.coalesce(func.sum(PointTransaction.points_awarded), 0)).where(
            PointTransaction.user_id == user_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def count_for_user(session: AsyncSession, user_id: int) -> int:
        stmt = select(func.count(PointTransaction.id)).where(PointTransaction.user_id == user_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
