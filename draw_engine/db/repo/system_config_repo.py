from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.dialect import dialect_insert
from draw_engine.db.models.system_configs import SystemConfig


class SystemConfigRepo:
    @staticmethod
    async def get_by_key(session: AsyncSession, key: str) -> SystemConfig | None:
        stmt = select(SystemConfig).where(SystemConfig.key == key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def upsert(
        session: AsyncSession,
        *,
        key: str,
        value: Any,
        updated_at: datetime,
        description: str | None = None,
    ) -> None:
        stmt = dialect_insert(session, SystemConfig).values(
            key=key,
            value=value,
            description=description,
            updated_at=updated_at,
        )
        set_values: dict[str, Any] = {
            "value": stmt.excluded.value,
            "updated_at": stmt.excluded.updated_at,
        }
        if description is not None:
            set_values["description"] = stmt.excluded.description
        stmt = stmt.on_conflict_do_update(index_elements=[SystemConfig.key], set_=set_values)
        await session.execute(stmt)
