from __future__ import annotations

from collections.abc import Collection

from sqlalchemy.ext.asyncio import AsyncSession

from draw_engine.db.repo.blacklist_repo import BlacklistRepo
from draw_engine.db.repo.participants_repo import ParticipantsRepo
from draw_engine.draws.types import EligibilityWindow, Participant, ParticipantPools


async def load_jackpot_pool(
    session: AsyncSession,
    *,
    window: EligibilityWindow,
) -> tuple[Participant, ...]:
    users = await ParticipantsRepo.list_jackpot_pool(
        session,
        window_start=window.start_utc,
        window_cutoff=window.cutoff_utc,
    )
    return tuple(Participant.from_user(user) for user in users)


async def load_consolation_pool(
    session: AsyncSession,
    *,
    window: EligibilityWindow,
    eligible_digits: Collection[int],
) -> tuple[Participant, ...]:
    users = await ParticipantsRepo.list_consolation_pool(
        session,
        window_start=window.start_utc,
        window_cutoff=window.cutoff_utc,
        eligible_digits=eligible_digits,
    )
    return tuple(Participant.from_user(user) for user in users)


async def load_participant_pools(
    session: AsyncSession,
    *,
    window: EligibilityWindow,
    eligible_digits: Collection[int],
) -> ParticipantPools:
    jackpot_pool = await load_jackpot_pool(session, window=window)
    if not jackpot_pool:
        return ParticipantPools(jackpot_pool=(), consolation_pool=())
    consolation_pool = await load_consolation_pool(
        session,
        window=window,
        eligible_digits=eligible_digits,
    )
    return ParticipantPools(jackpot_pool=jackpot_pool, consolation_pool=consolation_pool)


async def is_blacklisted(session: AsyncSession, *, msisdn: str) -> bool:
    return await BlacklistRepo.get_by_msisdn(session, msisdn) is not None


def is_jackpot_pick_valid(participant: Participant, *, window: EligibilityWindow) -> bool:
    if not participant.opt_in or participant.opt_in_at is None:
        return False
    return participant.opt_in_at < window.cutoff_utc
