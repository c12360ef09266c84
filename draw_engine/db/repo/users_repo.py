from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_msisdn(session: AsyncSession, msisdn: str) -> User | None:
        stmt = select(User).where(User.msisdn == msisdn)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, user: User) -> User:
        session.add(user)
        await session.flush()
        return user

    @staticmethod
    async def increment_points(
        session: AsyncSession,
        *,
        user_id: int,
        points: int,
        touched_at: datetime,
    ) -> str | None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                points=User.points + points,
                last_activity_at=touched_at,
                updated_at=touched_at,
            )
            .returning(User.msisdn)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def set_blacklisted(
        session: AsyncSession,
        *,
        msisdn: str,
        is_blacklisted: bool,
        updated_at: datetime,
    ) -> int:
        stmt = (
            update(User)
            .where(User.msisdn == msisdn)
            .values(is_blacklisted=is_blacklisted, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def touch_last_activity(session: AsyncSession, *, user_id: int, touched_at: datetime) -> int:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(last_activity_at=touched_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0
