from __future__ import annotations


from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.models.blacklist_entries import BlacklistEntry


class BlacklistRepo:
    @staticmethod
    async def get_by_msisdn(session: AsyncSession, msisdn: str) -> BlacklistEntry | None:
        stmt = select(BlacklistEntry).where(BlacklistEntry.msisdn == msisdn)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, entry: BlacklistEntry) -> BlacklistEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def delete_by_msisdn(session: AsyncSession, msisdn: str) -> int:
        stmt = delete(BlacklistEntry).where(BlacklistEntry.msisdn == msisdn)
        result = await session.execute(stmt)
        return result.rowcount or 0
