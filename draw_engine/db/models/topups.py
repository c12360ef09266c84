from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from draw_engine.db.models.base import Base, BigIntId


class Topup(Base):
    __tablename__ = "topups"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_topups_amount_non_negative"),
        CheckConstraint("points_earned >= 0", name="ck_topups_points_earned_non_negative"),
        UniqueConstraint("msisdn", "transaction_ref", name="uq_topups_msisdn_transaction_ref"),
        Index("idx_topups_topup_at", "topup_at"),
        Index("idx_topups_msisdn_topup_at", "msisdn", "topup_at"),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    msisdn: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    topup_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    transaction_ref: Mapped[str] = mapped_column(String(64), nullable=False)
    channel: Mapped[str | None] = mapped_column(String(32), nullable=True)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
