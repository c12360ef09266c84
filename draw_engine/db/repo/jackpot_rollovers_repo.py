from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.dialect import dialect_insert
from draw_engine.db.models.jackpot_rollovers import JackpotRollover


class JackpotRolloversRepo:
    @staticmethod
    async def create_if_absent(
        session: AsyncSession,
        *,
        source_draw_id: int,
        source_draw_date: date,
        amount: Decimal,
        destination_draw_date: date,
        destination_draw_id: int | None,
        reason: str,
        created_at: datetime,
    ) -> tuple[JackpotRollover, bool]:
        stmt = (
            dialect_insert(session, JackpotRollover)
            .values(
                source_draw_id=source_draw_id,
                source_draw_date=source_draw_date,
                amount=amount,
                destination_draw_date=destination_draw_date,
                destination_draw_id=destination_draw_id,
                reason=reason,
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=[JackpotRollover.source_draw_id])
        )
        result = await session.execute(stmt)
        created = (result.rowcount or 0) == 1
        rollover = await JackpotRolloversRepo.get_by_source_draw_id(session, source_draw_id)
        if rollover is None:
            raise RuntimeError(f"rollover for draw {source_draw_id} vanished after insert")
        return rollover, created

    @staticmethod
    async def get_by_source_draw_id(
        session: AsyncSession,
        source_draw_id: int,
    ) -> JackpotRollover | None:
        stmt = select(JackpotRollover).where(JackpotRollover.source_draw_id == source_draw_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_destination_date(
        session: AsyncSession,
        destination_draw_date: date,
    ) -> list[JackpotRollover]:
        stmt = (
            select(JackpotRollover)
            .where(JackpotRollover.destination_draw_date == destination_draw_date)
            .order_by(JackpotRollover.created_at.asc(), JackpotRollover.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_pending(session: AsyncSession, *, effective_date: date | None) -> list[JackpotRollover]:
        stmt = select(JackpotRollover)
        if effective_date is not None:
            stmt = stmt.where(JackpotRollover.destination_draw_date > effective_date)
        stmt = stmt.order_by(JackpotRollover.destination_draw_date.asc(), JackpotRollover.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def sum_pending_amount(session: AsyncSession, *, effective_date: date | None) -> Decimal:
        stmt = select(func.coalesce(func.sum(JackpotRollover.amount), 0))
        if effective_date is not None:
            stmt = stmt.where(JackpotRollover.destination_draw_date > effective_date)
        result = await session.execute(stmt)
        return Decimal(str(result.scalar_one() or 0))

    @staticmethod
    async def link_destination(
        session: AsyncSession,
        *,
        destination_draw_date: date,
        destination_draw_id: int,
    ) -> int:
        stmt = (
            update(JackpotRollover)
            .where(
                JackpotRollover.destination_draw_date == destination_draw_date,
                JackpotRollover.destination_draw_id.is_(None),
            )
            .values(destination_draw_id=destination_draw_id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0
