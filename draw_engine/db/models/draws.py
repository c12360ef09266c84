from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from draw_engine.db.models.base import Base, BigIntId


class Draw(Base):
    __tablename__ = "draws"
    __table_args__ = (
        CheckConstraint("draw_type IN ('DAILY','WEEKLY')", name="ck_draws_draw_type"),
        CheckConstraint(
            "status IN ('SCHEDULED','EXECUTING','COMPLETED','FAILED')",
            name="ck_draws_status",
        ),
        CheckConstraint(
            "jackpot_validation_status IN "
            "('PENDING','VALID','INVALID_NOT_OPTED_IN','NO_PARTICIPANTS')",
            name="ck_draws_jackpot_validation_status",
        ),
        Index("idx_draws_status_date", "status", "draw_date"),
        Index("idx_draws_type_status_date", "draw_type", "status", text("draw_date DESC")),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    draw_date: Mapped[date] = mapped_column(Date, unique=True, nullable=False)
    draw_type: Mapped[str] = mapped_column(String(16), nullable=False)
    eligible_digits: Mapped[list[int]] = mapped_column(JSON, nullable=False)
    use_default_digits: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    prize_tiers: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    base_jackpot: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    incoming_rollover: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    calculated_jackpot: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    jackpot_winner_msisdn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    jackpot_validation_status: Mapped[str] = mapped_column(String(32), nullable=False)
    rollover_executed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rng_seed: Mapped[str | None] = mapped_column(String(32), nullable=True)
    execution_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    execution_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    execution_log: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    pool_a_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pool_b_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_winners: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
