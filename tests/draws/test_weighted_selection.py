from __future__ import annotations

from draw_engine.core.clock import build_rng
from draw_engine.draws.selection import WeightedPool, select_weighted
from draw_engine.draws.types import Participant


def _participant(user_id: int, points: int) -> Participant:
    return Participant(
        user_id=user_id,
        msisdn=f"23480000{user_id:04d}",
        points=points,
        opt_in=True,
        opt_in_at=None,
    )


def test_weight_is_at_least_one() -> None:
    assert _participant(1, 0).weight == 1
    assert _participant(2, 25).weight == 25


def test_select_weighted_returns_distinct_participants() -> None:
    pool = [_participant(index, index) for index in range(1, 21)]

    picks = select_weighted(pool, rng=build_rng(42), count=10)

    assert len(picks) == 10
    assert len({pick.user_id for pick in picks}) == 10


def test_select_weighted_is_deterministic_for_a_seed_and_ignores_input_order() -> None:
    pool = [_participant(index, index * 3) for index in range(1, 31)]

    first = select_weighted(pool, rng=build_rng(7), count=5)
    second = select_weighted(list(reversed(pool)), rng=build_rng(7), count=5)

    assert [pick.user_id for pick in first] == [pick.user_id for pick in second]


def test_select_weighted_respects_exclusions_and_pool_size() -> None:
    pool = [_participant(index, 1) for index in range(1, 6)]
    excluded = {pool[0].msisdn, pool[1].msisdn}

    picks = select_weighted(pool, rng=build_rng(1), count=10, excluded=excluded)

    assert {pick.user_id for pick in picks} == {3, 4, 5}


def test_select_weighted_skips_rejected_candidates() -> None:
    pool = [_participant(index, 1) for index in range(1, 7)]

    picks = select_weighted(pool, rng=build_rng(3), count=6, reject=lambda item: item.user_id % 2 == 0)

    assert sorted(pick.user_id for pick in picks) == [1, 3, 5]


def test_pool_deduplicates_and_tracks_weight() -> None:
    pool = WeightedPool([_participant(1, 5), _participant(1, 5), _participant(2, 3)])

    assert len(pool) == 2
    assert pool.total_weight == 8
    pool.exclude(_participant(2, 3).msisdn)
    assert pool.total_weight == 5
    picked = pool.pick(build_rng(0))
    assert picked is not None and picked.user_id == 1
    assert pool.pick(build_rng(0)) is None
    assert picked.msisdn in pool.excluded


def test_heavier_participants_win_more_often() -> None:
    heavy, light = _participant(1, 99), _participant(2, 1)
    heavy_wins = sum(
        1
        for seed in range(1000)
        if WeightedPool([heavy, light]).pick(build_rng(seed)).user_id == heavy.user_id
    )

    assert heavy_wins > 950
