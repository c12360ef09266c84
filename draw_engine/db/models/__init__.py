from draw_engine.db.models.base import Base
from draw_engine.db.models.blacklist_entries import BlacklistEntry
from draw_engine.db.models.draws import Draw
from draw_engine.db.models.jackpot_rollovers import JackpotRollover
from draw_engine.db.models.point_transactions import PointTransaction
from draw_engine.db.models.system_configs import SystemConfig
from draw_engine.db.models.topups import Topup
from draw_engine.db.models.users import User
from draw_engine.db.models.winners import Winner

__all__ = [
    "Base",
    "BlacklistEntry",
    "Draw",
    "JackpotRollover",
    "PointTransaction",
    "SystemConfig",
    "Topup",
    "User",
    "Winner",
]
