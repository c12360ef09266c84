from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Sequence

from draw_engine.draws.types import Participant


class WeightedPool:
    """Working pool for weighted picks without replacement.

    Each participant's weight is max(points, 1). Participants are ordered by
    user id so a fixed seed replays the same picks.
    """

    __slots__ = ("_members", "_excluded", "_total_weight")

    def __init__(self, participants: Iterable[Participant], *, excluded: Iterable[str] = ()) -> None:
        self._excluded: set[str] = set(excluded)
        unique: dict[int, Participant] = {}
        for participant in participants:
            unique.setdefault(participant.user_id, participant)
        self._members: list[Participant] = [
            participant
            for participant in sorted(unique.values(), key=lambda item: item.user_id)
            if participant.msisdn not in self._excluded
        ]
        self._total_weight = sum(participant.weight for participant in self._members)

    def __len__(self) -> int:
        return len(self._members)

    @property
    def total_weight(self) -> int:
        return self._total_weight

    @property
    def excluded(self) -> frozenset[str]:
        return frozenset(self._excluded)

    def exclude(self, msisdn: str) -> None:
        self._excluded.add(msisdn)
        kept: list[Participant] = []
        for participant in self._members:
            if participant.msisdn == msisdn:
                self._total_weight -= participant.weight
            else:
                kept.append(participant)
        self._members = kept

    def pick(self, rng: random.Random) -> Participant | None:
        if self._total_weight <= 0 or not self._members:
            return None
        threshold = rng.randrange(self._total_weight)
        running = 0
        for index, participant in enumerate(self._members):
            running += participant.weight
            if running > threshold:
                del self._members[index]
                self._total_weight -= participant.weight
                self._excluded.add(participant.msisdn)
                return participant
        raise RuntimeError("weighted walk ran past the pool total")


def select_weighted(
    pool: Sequence[Participant],
    *,
    rng: random.Random,
    count: int,
    excluded: Iterable[str] = (),
    reject: Callable[[Participant], bool] | None = None,
) -> list[Participant]:
    """Pick up to `count` distinct participants, weighted by max(points, 1).

    Candidates for which `reject` returns True are dropped and do not count
    towards `count`.
    """
    working = WeightedPool(pool, excluded=excluded)
    picks: list[Participant] = []
    while len(picks) < max(0, int(count)):
        candidate = working.pick(rng)
        if candidate is None:
            break
        if reject is not None and reject(candidate):
            continue
        picks.append(candidate)
    return picks
