from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from draw_engine.db.models.base import Base, BigIntId


class Winner(Base):
    __tablename__ = "winners"
    __table_args__ = (
        CheckConstraint(
            "claim_status IN ('PENDING','PROCESSING','PAID','FAILED','INELIGIBLE')",
            name="ck_winners_claim_status",
        ),
        CheckConstraint("prize_amount >= 0", name="ck_winners_prize_amount_non_negative"),
        Index("idx_winners_draw_id", "draw_id"),
        Index("idx_winners_msisdn", "msisdn"),
        Index("idx_winners_claim_status", "claim_status"),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    draw_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("draws.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    msisdn: Mapped[str] = mapped_column(String(20), nullable=False)
    prize_category: Mapped[str] = mapped_column(String(32), nullable=False)
    prize_amount: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    win_date: Mapped[date] = mapped_column(Date, nullable=False)
    claim_status: Mapped[str] = mapped_column(String(16), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
