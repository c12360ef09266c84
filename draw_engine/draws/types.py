from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from draw_engine.core.clock import ensure_utc
from draw_engine.db.models.draws import Draw
from draw_engine.db.models.jackpot_rollovers import JackpotRollover
from draw_engine.db.models.users import User
from draw_engine.db.models.winners import Winner
from draw_engine.draws.constants import PRIZE_CATEGORY_JACKPOT


def _as_utc(value: datetime | None) -> datetime | None:
    return None if value is None else ensure_utc(value)


@dataclass(frozen=True, slots=True)
class PrizeTier:
    category: str
    amount: Decimal
    count: int

    @property
    def is_jackpot(self) -> bool:
        return self.category.strip().upper() == PRIZE_CATEGORY_JACKPOT

    def to_config(self) -> dict[str, Any]:
        return {"category": self.category, "amount": str(self.amount), "count": self.count}


@dataclass(frozen=True, slots=True)
class PrizeStructure:
    draw_type: str
    tiers: tuple[PrizeTier, ...]
    updated_at: datetime | None

    @property
    def jackpot_tier(self) -> PrizeTier:
        return next(tier for tier in self.tiers if tier.is_jackpot)


@dataclass(frozen=True, slots=True)
class BaseJackpot:
    draw_type: str
    amount: Decimal
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class Participant:
    user_id: int
    msisdn: str
    points: int
    opt_in: bool
    opt_in_at: datetime | None

    @property
    def weight(self) -> int:
        return max(int(self.points), 1)

    @classmethod
    def from_user(cls, user: User) -> Participant:
        return cls(
            user_id=int(user.id),
            msisdn=user.msisdn,
            points=int(user.points),
            opt_in=bool(user.opt_in),
            opt_in_at=_as_utc(user.opt_in_at),
        )


@dataclass(frozen=True, slots=True)
class EligibilityWindow:
    draw_date: date
    draw_type: str
    start_utc: datetime
    cutoff_utc: datetime


@dataclass(frozen=True, slots=True)
class ParticipantPools:
    jackpot_pool: tuple[Participant, ...]
    consolation_pool: tuple[Participant, ...]


@dataclass(frozen=True, slots=True)
class DrawSnapshot:
    draw_id: int
    draw_date: date
    draw_type: str
    status: str
    eligible_digits: tuple[int, ...]
    use_default_digits: bool
    prize_tiers: tuple[PrizeTier, ...]
    base_jackpot: Decimal
    incoming_rollover: Decimal
    calculated_jackpot: Decimal
    jackpot_winner_msisdn: str | None
    jackpot_validation_status: str
    rollover_executed: bool
    rng_seed: int | None
    execution_started_at: datetime | None
    execution_ended_at: datetime | None
    execution_log: tuple[dict[str, Any], ...]
    error_message: str | None
    pool_a_size: int
    pool_b_size: int
    total_winners: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, draw: Draw) -> DrawSnapshot:
        return cls(
            draw_id=int(draw.id),
            draw_date=draw.draw_date,
            draw_type=draw.draw_type,
            status=draw.status,
            eligible_digits=tuple(int(digit) for digit in draw.eligible_digits or ()),
            use_default_digits=bool(draw.use_default_digits),
            prize_tiers=tuple(
                PrizeTier(
                    category=str(tier["category"]),
                    amount=Decimal(str(tier["amount"])),
                    count=int(tier["count"]),
                )
                for tier in draw.prize_tiers or ()
            ),
            base_jackpot=Decimal(draw.base_jackpot),
            incoming_rollover=Decimal(draw.incoming_rollover),
            calculated_jackpot=Decimal(draw.calculated_jackpot),
            jackpot_winner_msisdn=draw.jackpot_winner_msisdn,
            jackpot_validation_status=draw.jackpot_validation_status,
            rollover_executed=bool(draw.rollover_executed),
            rng_seed=int(draw.rng_seed) if draw.rng_seed is not None else None,
            execution_started_at=_as_utc(draw.execution_started_at),
            execution_ended_at=_as_utc(draw.execution_ended_at),
            execution_log=tuple(dict(entry) for entry in draw.execution_log or ()),
            error_message=draw.error_message,
            pool_a_size=int(draw.pool_a_size or 0),
            pool_b_size=int(draw.pool_b_size or 0),
            total_winners=int(draw.total_winners or 0),
            created_at=ensure_utc(draw.created_at),
            updated_at=ensure_utc(draw.updated_at),
        )


@dataclass(frozen=True, slots=True)
class WinnerSnapshot:
    winner_id: int
    draw_id: int
    user_id: int
    msisdn: str
    prize_category: str
    prize_amount: Decimal
    win_date: date
    claim_status: str
    notes: str | None
    claimed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, winner: Winner) -> WinnerSnapshot:
        return cls(
            winner_id=int(winner.id),
            draw_id=int(winner.draw_id),
            user_id=int(winner.user_id),
            msisdn=winner.msisdn,
            prize_category=winner.prize_category,
            prize_amount=Decimal(winner.prize_amount),
            win_date=winner.win_date,
            claim_status=winner.claim_status,
            notes=winner.notes,
            claimed_at=_as_utc(winner.claimed_at),
            created_at=ensure_utc(winner.created_at),
            updated_at=ensure_utc(winner.updated_at),
        )


@dataclass(frozen=True, slots=True)
class RolloverSnapshot:
    rollover_id: int
    source_draw_id: int
    source_draw_date: date
    amount: Decimal
    destination_draw_date: date
    destination_draw_id: int | None
    reason: str
    created_at: datetime

    @classmethod
    def from_model(cls, rollover: JackpotRollover) -> RolloverSnapshot:
        return cls(
            rollover_id=int(rollover.id),
            source_draw_id=int(rollover.source_draw_id),
            source_draw_date=rollover.source_draw_date,
            amount=Decimal(rollover.amount),
            destination_draw_date=rollover.destination_draw_date,
            destination_draw_id=(
                int(rollover.destination_draw_id) if rollover.destination_draw_id is not None else None
            ),
            reason=rollover.reason,
            created_at=ensure_utc(rollover.created_at),
        )


@dataclass(frozen=True, slots=True)
class JackpotStatus:
    current_amount: Decimal
    reference_draw_id: int | None
    reference_draw_date: date | None
    pending_rollover_total: Decimal
    last_updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class JackpotHistoryEntry:
    draw_id: int
    draw_date: date
    draw_type: str
    jackpot_amount: Decimal
    jackpot_validation_status: str
    won: bool
    winner_msisdn_masked: str | None
    rollover_executed: bool


@dataclass(frozen=True, slots=True)
class DrawConfigPreview:
    draw_date: date
    recommended_draw_type: str
    recommended_digits: tuple[int, ...]
    prize_tiers: tuple[PrizeTier, ...]
    base_jackpot: Decimal | None
    incoming_rollover: Decimal
    projected_jackpot: Decimal | None
    existing_draw: DrawSnapshot | None
