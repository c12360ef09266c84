from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from draw_engine.db.models.base import Base, BigIntId


class JackpotRollover(Base):
    __tablename__ = "jackpot_rollovers"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_jackpot_rollovers_amount_non_negative"),
        CheckConstraint(
            "destination_draw_date > source_draw_date",
            name="ck_jackpot_rollovers_destination_after_source",
        ),
        Index("idx_jackpot_rollovers_destination_date", "destination_draw_date"),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    source_draw_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("draws.id"),
        unique=True,
        nullable=False,
    )
    source_draw_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    destination_draw_date: Mapped[date] = mapped_column(Date, nullable=False)
    destination_draw_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("draws.id"),
        nullable=True,
    )
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
