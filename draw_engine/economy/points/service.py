from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.core import clock
from draw_engine.core.msisdn import canonicalize_msisdn, mask_msisdn
from draw_engine.db.models.point_transactions import PointTransaction
from draw_engine.db.models.topups import Topup
from draw_engine.db.repo.point_transactions_repo import PointTransactionsRepo
from draw_engine.db.repo.topups_repo import TopupsRepo
from draw_engine.db.repo.users_repo import UsersRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.draw_config import DRAW_COUNTRY_CODE
from draw_engine.economy.points.errors import InvalidArgumentError, UserNotFoundError
from draw_engine.economy.points.rules import calculate_points, to_amount
from draw_engine.economy.points.types import TopupResult

logger = structlog.get_logger("draw_engine.economy.points.service")


async def apply_points_allocation(
    session: AsyncSession,
    *,
    user_id: int,
    amount: Decimal,
    topup_at: datetime,
    now_utc: datetime,
) -> int:
    points = calculate_points(amount)
    if points <= 0:
        return 0
    # Increment first; rowcount 0 means no user and nothing is written.
    msisdn = await UsersRepo.increment_points(
        session,
        user_id=user_id,
        points=points,
        touched_at=now_utc,
    )
    if msisdn is None:
        raise UserNotFoundError(f"user {user_id} does not exist")
    await PointTransactionsRepo.create(
        session,
        entry=PointTransaction(
            user_id=user_id,
            msisdn=msisdn,
            topup_amount=amount,
            points_awarded=points,
            transaction_at=topup_at,
            created_at=now_utc,
        ),
    )
    return points


async def allocate_points(
    *,
    user_id: int,
    amount: Decimal | int | str,
    topup_at: datetime,
    now_utc: datetime | None = None,
) -> int:
    resolved_amount = to_amount(amount)
    if calculate_points(resolved_amount) <= 0:
        logger.info("points_allocation_skipped", user_id=user_id, amount=str(resolved_amount))
        return 0
    resolved_topup_at = clock.ensure_utc(topup_at)
    resolved_now = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> int:
        async with SessionLocal.begin() as session:
            return await apply_points_allocation(
                session,
                user_id=user_id,
                amount=resolved_amount,
                topup_at=resolved_topup_at,
                now_utc=resolved_now,
            )

    awarded = await run_with_store_retry(_attempt, name="allocate_points")
    logger.info(
        "points_allocated",
        user_id=user_id,
        amount=str(resolved_amount),
        points=awarded,
    )
    return awarded


def _as_result(topup: Topup, *, idempotent_replay: bool) -> TopupResult:
    return TopupResult(
        topup_id=int(topup.id),
        msisdn=topup.msisdn,
        amount=Decimal(topup.amount),
        topup_at=clock.ensure_utc(topup.topup_at),
        transaction_ref=topup.transaction_ref,
        points_earned=int(topup.points_earned),
        idempotent_replay=idempotent_replay,
    )


async def _load_existing_topup(*, msisdn: str, transaction_ref: str) -> TopupResult | None:
    async with SessionLocal() as session:
        existing = await TopupsRepo.get_by_msisdn_and_ref(
            session,
            msisdn=msisdn,
            transaction_ref=transaction_ref,
        )
        return None if existing is None else _as_result(existing, idempotent_replay=True)


async def process_topup(
    *,
    msisdn: str,
    amount: Decimal | int | str,
    topup_at: datetime,
    transaction_ref: str,
    channel: str | None = None,
    now_utc: datetime | None = None,
) -> TopupResult:
    canonical = canonicalize_msisdn(msisdn, country_code=DRAW_COUNTRY_CODE)
    resolved_amount = to_amount(amount)
    resolved_ref = str(transaction_ref or "").strip()
    if not resolved_ref:
        raise InvalidArgumentError("transaction reference is required")
    resolved_topup_at = clock.ensure_utc(topup_at)
    resolved_now = clock.ensure_utc(now_utc or clock.now_utc())

    async def _attempt() -> TopupResult:
        async with SessionLocal.begin() as session:
            existing = await TopupsRepo.get_by_msisdn_and_ref(
                session,
                msisdn=canonical,
                transaction_ref=resolved_ref,
            )
            if existing is not None:
                return _as_result(existing, idempotent_replay=True)

            user = await UsersRepo.get_by_msisdn(session, canonical)
            if user is None:
                raise UserNotFoundError(f"no user for msisdn {mask_msisdn(canonical)}")
            points = await apply_points_allocation(
                session,
                user_id=int(user.id),
                amount=resolved_amount,
                topup_at=resolved_topup_at,
                now_utc=resolved_now,
            )
            if points == 0:
                await UsersRepo.touch_last_activity(
                    session,
                    user_id=int(user.id),
                    touched_at=resolved_now,
                )
            topup = await TopupsRepo.create(
                session,
                topup=Topup(
                    msisdn=canonical,
                    amount=resolved_amount,
                    topup_at=resolved_topup_at,
                    transaction_ref=resolved_ref,
                    channel=channel,
                    points_earned=points,
                    processed=True,
                    created_at=resolved_now,
                ),
            )
            return _as_result(topup, idempotent_replay=False)

    try:
        result = await run_with_store_retry(_attempt, name="process_topup")
    except IntegrityError:
        replay = await run_with_store_retry(
            lambda: _load_existing_topup(msisdn=canonical, transaction_ref=resolved_ref),
            name="process_topup.load_existing",
        )
        if replay is None:
            raise
        result = replay

    logger.info(
        "topup_processed",
        msisdn=mask_msisdn(result.msisdn),
        transaction_ref=result.transaction_ref,
        points=result.points_earned,
        idempotent_replay=result.idempotent_replay,
    )
    return result
