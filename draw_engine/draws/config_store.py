from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.core import clock
from draw_engine.core.clock import ensure_utc
from draw_engine.db.repo.system_config_repo import SystemConfigRepo
from draw_engine.db.retry import run_with_store_retry
from draw_engine.db.session import SessionLocal
from draw_engine.draws.constants import (
    CONFIG_KEY_BASE_JACKPOT_PREFIX,
    CONFIG_KEY_PRIZE_STRUCTURE_PREFIX,
)
from draw_engine.draws.errors import ConfigNotFoundError, FatalDrawError, InvalidArgumentError
from draw_engine.draws.rules import normalize_draw_type
from draw_engine.draws.types import BaseJackpot, PrizeStructure, PrizeTier

logger = structlog.get_logger("draw_engine.draws.config_store")


class PrizeTierPayload(BaseModel):
    category: str = Field(min_length=1, max_length=32)
    amount: Decimal = Field(ge=0, max_digits=16, decimal_places=2)
    count: int = Field(ge=1)


_TIERS_ADAPTER = TypeAdapter(list[PrizeTierPayload])


def prize_structure_key(draw_type: str) -> str:
    return f"{CONFIG_KEY_PRIZE_STRUCTURE_PREFIX}{draw_type}"


def base_jackpot_key(draw_type: str) -> str:
    return f"{CONFIG_KEY_BASE_JACKPOT_PREFIX}{draw_type}"


def parse_prize_tiers(raw: Any) -> tuple[PrizeTier, ...]:
    """Validate a prize structure and return its tiers in the given order.

    Raises InvalidArgumentError on bad shape, a missing or duplicated jackpot
    tier, or duplicated categories.
    """
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise InvalidArgumentError("prize structure must be a list of tiers")
    items = [item.to_config() if isinstance(item, PrizeTier) else item for item in raw]
    try:
        payloads = _TIERS_ADAPTER.validate_python(items)
    except ValidationError as exc:
        raise InvalidArgumentError(f"invalid prize structure: {exc.error_count()} error(s)") from exc
    if not payloads:
        raise InvalidArgumentError("prize structure must contain at least one tier")

    tiers = tuple(
        PrizeTier(category=payload.category.strip(), amount=payload.amount, count=payload.count)
        for payload in payloads
    )
    categories = [tier.category.upper() for tier in tiers]
    if len(set(categories)) != len(categories):
        raise InvalidArgumentError("prize structure categories must be unique")
    jackpot_tiers = [tier for tier in tiers if tier.is_jackpot]
    if len(jackpot_tiers) != 1:
        raise InvalidArgumentError("prize structure must contain exactly one jackpot tier")
    if jackpot_tiers[0].count != 1:
        raise InvalidArgumentError("jackpot tier must award exactly one winner")
    return tiers


def parse_amount(raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidArgumentError("amount must be numeric")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgumentError(f"amount must be numeric, got {raw!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise InvalidArgumentError(f"amount must be a non-negative number, got {raw!r}")
    return amount.quantize(Decimal("0.01"))


async def read_prize_structure(session: AsyncSession, *, draw_type: str) -> PrizeStructure:
    key = prize_structure_key(draw_type)
    config = await SystemConfigRepo.get_by_key(session, key)
    if config is None:
        raise ConfigNotFoundError(f"config key {key!r} is not set")
    try:
        tiers = parse_prize_tiers(config.value)
    except InvalidArgumentError as exc:
        raise FatalDrawError(f"stored {key!r} does not match the prize structure schema: {exc}") from exc
    return PrizeStructure(
        draw_type=draw_type,
        tiers=tiers,
        updated_at=ensure_utc(config.updated_at),
    )


async def read_base_jackpot(session: AsyncSession, *, draw_type: str) -> BaseJackpot:
    key = base_jackpot_key(draw_type)
    config = await SystemConfigRepo.get_by_key(session, key)
    if config is None:
        raise ConfigNotFoundError(f"config key {key!r} is not set")
    try:
        amount = parse_amount(config.value)
    except InvalidArgumentError as exc:
        raise FatalDrawError(f"stored {key!r} is not a valid amount: {exc}") from exc
    return BaseJackpot(draw_type=draw_type, amount=amount, updated_at=ensure_utc(config.updated_at))


async def write_prize_structure(
    session: AsyncSession,
    *,
    draw_type: str,
    tiers: tuple[PrizeTier, ...],
    updated_at: datetime,
) -> None:
    await SystemConfigRepo.upsert(
        session,
        key=prize_structure_key(draw_type),
        value=[tier.to_config() for tier in tiers],
        updated_at=updated_at,
        description=f"Prize structure for {draw_type} draws",
    )


async def write_base_jackpot(
    session: AsyncSession,
    *,
    draw_type: str,
    amount: Decimal,
    updated_at: datetime,
) -> None:
    await SystemConfigRepo.upsert(
        session,
        key=base_jackpot_key(draw_type),
        value=str(amount),
        updated_at=updated_at,
        description=f"Base jackpot for {draw_type} draws",
    )


async def get_prize_structure(*, draw_type: str) -> PrizeStructure:
    resolved_type = normalize_draw_type(draw_type)

    async def _read() -> PrizeStructure:
        async with SessionLocal() as session:
            return await read_prize_structure(session, draw_type=resolved_type)

    return await run_with_store_retry(_read, name="get_prize_structure")


async def update_prize_structure(
    *,
    draw_type: str,
    tiers: Iterable[PrizeTier | Mapping[str, Any]],
    now_utc: datetime | None = None,
) -> PrizeStructure:
    resolved_type = normalize_draw_type(draw_type)
    resolved_tiers = parse_prize_tiers(list(tiers))
    updated_at = ensure_utc(now_utc or clock.now_utc())

    async def _write() -> None:
        async with SessionLocal.begin() as session:
            await write_prize_structure(
                session,
                draw_type=resolved_type,
                tiers=resolved_tiers,
                updated_at=updated_at,
            )

    await run_with_store_retry(_write, name="update_prize_structure")
    logger.info(
        "prize_structure_updated",
        draw_type=resolved_type,
        tiers_total=len(resolved_tiers),
    )
    return PrizeStructure(draw_type=resolved_type, tiers=resolved_tiers, updated_at=updated_at)


async def get_base_jackpot(*, draw_type: str) -> BaseJackpot:
    resolved_type = normalize_draw_type(draw_type)

    async def _read() -> BaseJackpot:
        async with SessionLocal() as session:
            return await read_base_jackpot(session, draw_type=resolved_type)

    return await run_with_store_retry(_read, name="get_base_jackpot")


async def update_base_jackpot(
    *,
    draw_type: str,
    amount: Decimal | int | str,
    now_utc: datetime | None = None,
) -> BaseJackpot:
    resolved_type = normalize_draw_type(draw_type)
    resolved_amount = parse_amount(amount)
    updated_at = ensure_utc(now_utc or clock.now_utc())

    async def _write() -> None:
        async with SessionLocal.begin() as session:
            await write_base_jackpot(
                session,
                draw_type=resolved_type,
                amount=resolved_amount,
                updated_at=updated_at,
            )

    await run_with_store_retry(_write, name="update_base_jackpot")
    logger.info("base_jackpot_updated", draw_type=resolved_type, amount=str(resolved_amount))
    return BaseJackpot(draw_type=resolved_type, amount=resolved_amount, updated_at=updated_at)
