from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class TopupResult:
    topup_id: int
    msisdn: str
    amount: Decimal
    topup_at: datetime
    transaction_ref: str
    points_earned: int
    idempotent_replay: bool
