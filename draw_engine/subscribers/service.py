from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.core import clock
from draw_engine.core.msisdn import canonicalize_msisdn, mask_msisdn
from draw_engine.db.models.blacklist_entries import BlacklistEntry
from draw_engine.db.models.users import User
from draw_engine.db.repo.blacklist_repo import BlacklistRepo
from draw_engine.db.repo.users_repo import UsersRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.draw_config import DRAW_COUNTRY_CODE
from draw_engine.economy.points.errors import UserNotFoundError
from draw_engine.subscribers.types import SubscriberSnapshot

logger = structlog.get_logger("draw_engine.subscribers.service")


def _canonical(msisdn: str) -> str:
    return canonicalize_msisdn(msisdn, country_code=DRAW_COUNTRY_CODE)


async def _require_user(session: AsyncSession, msisdn: str) -> User:
    user = await UsersRepo.get_by_msisdn(session, msisdn)
    if user is None:
        raise UserNotFoundError(f"no user for msisdn {mask_msisdn(msisdn)}")
    return user


async def register_user(*, msisdn: str, now_utc: datetime | None = None) -> SubscriberSnapshot:
    canonical = _canonical(msisdn)
    created_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> SubscriberSnapshot:
        async with SessionLocal.begin() as session:
            existing = await UsersRepo.get_by_msisdn(session, canonical)
            if existing is not None:
                return SubscriberSnapshot.from_model(existing)
            blacklisted = await BlacklistRepo.get_by_msisdn(session, canonical) is not None
            user = await UsersRepo.create(
                session,
                user=User(
                    msisdn=canonical,
                    opt_in=False,
                    opt_in_at=None,
                    is_blacklisted=blacklisted,
                    points=0,
                    created_at=created_at,
                    updated_at=created_at,
                ),
            )
            return SubscriberSnapshot.from_model(user)

    try:
        return await run_with_store_retry(_attempt, name="register_user")
    except IntegrityError:
        # Concurrent registration of the same msisdn; the retry sees the winner's row.
        return await run_with_store_retry(_attempt, name="register_user.reload")


async def opt_in(
    *,
    msisdn: str,
    channel: str | None = None,
    now_utc: datetime | None = None,
) -> SubscriberSnapshot:
    canonical = _canonical(msisdn)
    changed_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> SubscriberSnapshot:
        async with SessionLocal.begin() as session:
            user = await _require_user(session, canonical)
            if not user.opt_in:
                user.opt_in = True
                user.opt_in_at = changed_at
                user.opt_in_channel = channel
                user.opt_out_at = None
            elif user.opt_in_at is None:
                user.opt_in_at = changed_at
            user.last_activity_at = changed_at
            user.updated_at = changed_at
            await session.flush()
            return SubscriberSnapshot.from_model(user)

    snapshot = await run_with_store_retry(_attempt, name="opt_in")
    logger.info("subscriber_opted_in", msisdn=mask_msisdn(canonical), channel=channel)
    return snapshot


async def opt_out(*, msisdn: str, now_utc: datetime | None = None) -> SubscriberSnapshot:
    canonical = _canonical(msisdn)
    changed_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> SubscriberSnapshot:
        async with SessionLocal.begin() as session:
            user = await _require_user(session, canonical)
            user.opt_in = False
            user.opt_out_at = changed_at
            user.last_activity_at = changed_at
            user.updated_at = changed_at
            await session.flush()
            return SubscriberSnapshot.from_model(user)

    snapshot = await run_with_store_retry(_attempt, name="opt_out")
    logger.info("subscriber_opted_out", msisdn=mask_msisdn(canonical))
    return snapshot


async def add_to_blacklist(
    *,
    msisdn: str,
    reason: str | None = None,
    now_utc: datetime | None = None,
) -> bool:
    """Blacklist an msisdn. Returns False when it was already listed."""
    canonical = _canonical(msisdn)
    created_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> bool:
        async with SessionLocal.begin() as session:
            if await BlacklistRepo.get_by_msisdn(session, canonical) is not None:
                return False
            await BlacklistRepo.create(
                session,
                entry=BlacklistEntry(msisdn=canonical, reason=reason, created_at=created_at),
            )
            await UsersRepo.set_blacklisted(
                session,
                msisdn=canonical,
                is_blacklisted=True,
                updated_at=created_at,
            )
            return True

    try:
        added = await run_with_store_retry(_attempt, name="add_to_blacklist")
    except IntegrityError:
        added = False
    logger.info("blacklist_entry_added", msisdn=mask_msisdn(canonical), added=added)
    return added


async def remove_from_blacklist(*, msisdn: str, now_utc: datetime | None = None) -> bool:
    canonical = _canonical(msisdn)
    updated_at = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> bool:
        async with SessionLocal.begin() as session:
            removed = await BlacklistRepo.delete_by_msisdn(session, canonical)
            await UsersRepo.set_blacklisted(
                session,
                msisdn=canonical,
                is_blacklisted=False,
                updated_at=updated_at,
            )
            return removed > 0

    removed = await run_with_store_retry(_attempt, name="remove_from_blacklist")
    logger.info("blacklist_entry_removed", msisdn=mask_msisdn(canonical), removed=removed)
    return removed
