from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from draw_engine.draws import config_store, jackpot, queries
from draw_engine.draws.execute import execute_draw
from draw_engine.draws.schedule import schedule_draw
from draw_engine.draws.types import (
    BaseJackpot,
    DrawConfigPreview,
    DrawSnapshot,
    JackpotHistoryEntry,
    JackpotStatus,
    PrizeStructure,
    PrizeTier,
    WinnerSnapshot,
)
from draw_engine.economy.points.service import allocate_points, process_topup
from draw_engine.economy.points.types import TopupResult


class DrawServiceFacade:
    """Single entry point for callers that drive the draw engine."""

    @staticmethod
    async def schedule_draw(
        *,
        draw_date: date,
        draw_type: str,
        eligible_digits: Iterable[int] | None = None,
        use_default_digits: bool = True,
        now_utc: datetime | None = None,
    ) -> DrawSnapshot:
        return await schedule_draw(
            draw_date=draw_date,
            draw_type=draw_type,
            eligible_digits=eligible_digits,
            use_default_digits=use_default_digits,
            now_utc=now_utc,
        )

    @staticmethod
    async def execute_draw(
        *,
        draw_id: int,
        seed: int | None = None,
        timeout_seconds: float | None = None,
    ) -> DrawSnapshot:
        return await execute_draw(draw_id=draw_id, seed=seed, timeout_seconds=timeout_seconds)

    @staticmethod
    async def get_draw_by_id(*, draw_id: int) -> DrawSnapshot:
        return await queries.get_draw_by_id(draw_id=draw_id)

    @staticmethod
    async def get_draw_by_date(*, draw_date: date) -> DrawSnapshot:
        return await queries.get_draw_by_date(draw_date=draw_date)

    @staticmethod
    async def get_winners_by_draw_id(*, draw_id: int) -> list[WinnerSnapshot]:
        return await queries.get_winners_by_draw_id(draw_id=draw_id)

    @staticmethod
    async def list_draws_in_range(*, start_date: date, end_date: date) -> list[DrawSnapshot]:
        return await queries.list_draws_in_range(start_date=start_date, end_date=end_date)

    @staticmethod
    async def list_winners_by_msisdn(*, msisdn: str, limit: int = 50) -> list[WinnerSnapshot]:
        return await queries.list_winners_by_msisdn(msisdn=msisdn, limit=limit)

    @staticmethod
    async def update_winner_claim_status(
        *,
        winner_id: int,
        claim_status: str,
        notes: str | None = None,
    ) -> WinnerSnapshot:
        return await queries.update_winner_claim_status(
            winner_id=winner_id,
            claim_status=claim_status,
            notes=notes,
        )

    @staticmethod
    async def get_prize_structure(*, draw_type: str) -> PrizeStructure:
        return await config_store.get_prize_structure(draw_type=draw_type)

    @staticmethod
    async def update_prize_structure(
        *,
        draw_type: str,
        tiers: Iterable[PrizeTier | Mapping[str, Any]],
    ) -> PrizeStructure:
        return await config_store.update_prize_structure(draw_type=draw_type, tiers=tiers)

    @staticmethod
    async def get_base_jackpot(*, draw_type: str) -> BaseJackpot:
        return await config_store.get_base_jackpot(draw_type=draw_type)

    @staticmethod
    async def update_base_jackpot(*, draw_type: str, amount: Decimal | int | str) -> BaseJackpot:
        return await config_store.update_base_jackpot(draw_type=draw_type, amount=amount)

    @staticmethod
    async def get_jackpot_status() -> JackpotStatus:
        return await jackpot.get_jackpot_status()

    @staticmethod
    async def get_jackpot_history(*, limit: int = 10) -> list[JackpotHistoryEntry]:
        return await jackpot.get_jackpot_history(limit=limit)

    @staticmethod
    def get_default_digits_for_day(weekday: int) -> tuple[int, ...]:
        return queries.get_default_digits_for_day(weekday)

    @staticmethod
    async def get_draw_config(*, draw_date: date) -> DrawConfigPreview:
        return await queries.get_draw_config(draw_date=draw_date)

    @staticmethod
    async def allocate_points(
        *,
        user_id: int,
        amount: Decimal | int | str,
        topup_at: datetime,
    ) -> int:
        return await allocate_points(user_id=user_id, amount=amount, topup_at=topup_at)

    @staticmethod
    async def process_topup(
        *,
        msisdn: str,
        amount: Decimal | int | str,
        topup_at: datetime,
        transaction_ref: str,
        channel: str | None = None,
    ) -> TopupResult:
        return await process_topup(
            msisdn=msisdn,
            amount=amount,
            topup_at=topup_at,
            transaction_ref=transaction_ref,
            channel=channel,
        )
