from draw_engine.db.repo.blacklist_repo import BlacklistRepo
from draw_engine.db.repo.draws_repo import DrawsRepo
from draw_engine.db.repo.jackpot_rollovers_repo import JackpotRolloversRepo
from draw_engine.db.repo.participants_repo import ParticipantsRepo
from draw_engine.db.repo.point_transactions_repo import PointTransactionsRepo
from draw_engine.db.repo.system_config_repo import SystemConfigRepo
from draw_engine.db.repo.topups_repo import TopupsRepo
from draw_engine.db.repo.users_repo import UsersRepo
from draw_engine.db.repo.winners_repo import WinnersRepo

__all__ = [
    "BlacklistRepo",
    "DrawsRepo",
    "JackpotRolloversRepo",
    "ParticipantsRepo",
    "PointTransactionsRepo",
    "SystemConfigRepo",
    "TopupsRepo",
    "UsersRepo",
    "WinnersRepo",
]
