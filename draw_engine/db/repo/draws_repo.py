from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.draws import Draw
from draw_engine.draws.constants import DRAW_STATUS_EXECUTING, DRAW_STATUS_SCHEDULED


class DrawsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, draw: Draw) -> Draw:
        session.add(draw)
        await session.flush()
        return draw

    @staticmethod
    async def get_by_id(session: AsyncSession, draw_id: int) -> Draw | None:
        return await session.get(Draw, draw_id, populate_existing=True)

    @staticmethod
    async def get_by_date(session: AsyncSession, draw_date: date) -> Draw | None:
        stmt = select(Draw).where(Draw.draw_date == draw_date)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_date_range(
        session: AsyncSession,
        *,
        start_date: date,
        end_date: date,
    ) -> list[Draw]:
        stmt = (
            select(Draw)
            .where(Draw.draw_date >= start_date, Draw.draw_date <= end_date)
            .order_by(Draw.draw_date.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_due_scheduled_ids(
        session: AsyncSession,
        *,
        on_or_before: date,
        limit: int,
    ) -> list[int]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Draw.id)
            .where(Draw.status == DRAW_STATUS_SCHEDULED, Draw.draw_date <= on_or_before)
            .order_by(Draw.draw_date.asc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return [int(value) for value in result.scalars().all()]

    @staticmethod
    async def find_next_scheduled(session: AsyncSession, *, after_date: date) -> Draw | None:
        stmt = (
            select(Draw)
            .where(Draw.status == DRAW_STATUS_SCHEDULED, Draw.draw_date > after_date)
            .order_by(Draw.draw_date.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def find_latest_by_type_and_statuses(
        session: AsyncSession,
        *,
        draw_type: str,
        statuses: Sequence[str],
    ) -> Draw | None:
        stmt = (
            select(Draw)
            .where(Draw.draw_type == draw_type, Draw.status.in_(tuple(statuses)))
            .order_by(Draw.draw_date.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_latest_by_status(session: AsyncSession, *, status: str, limit: int) -> list[Draw]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Draw)
            .where(Draw.status == status)
            .order_by(Draw.draw_date.desc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def transition_status(
        session: AsyncSession,
        *,
        draw_id: int,
        from_status: str,
        to_status: str,
        values: dict[str, Any] | None = None,
    ) -> bool:
        stmt = (
            update(Draw)
            .where(Draw.id == draw_id, Draw.status == from_status)
            .values(status=to_status, **(values or {}))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return (result.rowcount or 0) == 1

    @staticmethod
    async def update_executing(
        session: AsyncSession,
        *,
        draw_id: int,
        values: dict[str, Any],
    ) -> bool:
        stmt = (
            update(Draw)
            .where(Draw.id == draw_id, Draw.status == DRAW_STATUS_EXECUTING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return (result.rowcount or 0) == 1
