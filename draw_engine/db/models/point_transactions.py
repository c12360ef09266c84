from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from draw_engine.db.models.base import Base, BigIntId


class PointTransaction(Base):
    __tablename__ = "point_transactions"
    __table_args__ = (
        CheckConstraint("points_awarded > 0", name="ck_point_transactions_points_positive"),
        Index("idx_point_transactions_user_created", "user_id", "created_at"),
        Index("idx_point_transactions_msisdn", "msisdn"),
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    msisdn: Mapped[str] = mapped_column(String(20), nullable=False)
    topup_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    points_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    transaction_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
