import pytest

from tourneyengine.pairing.round_robin import (
    generate_round_robin,
    total_round_robin_matches,
)


def _teams(count):
    return [f"T{i}" for i in range(1, count + 1)]


def _round(schedule, number):
    return {(p.home, p.away) for p in schedule.pairings_for_round(number)}


def test_four_teams_follow_circle_method():
    schedule = generate_round_robin(["A", "B", "C", "D"])

    assert len(schedule.pairings) == 6
    assert schedule.round_count == 3
    assert _round(schedule, 1) == {("A", "D"), ("B", "C")}
    assert _round(schedule, 2) == {("A", "C"), ("D", "B")}
    assert _round(schedule, 3) == {("A", "B"), ("C", "D")}
    assert schedule.byes == {}


@pytest.mark.parametrize("count", [2, 3, 4, 5, 6, 7, 8, 11, 16])
def test_every_pair_meets_exactly_once(count):
    teams = _teams(count)
    schedule = generate_round_robin(teams)

    keys = [frozenset((p.home, p.away)) for p in schedule.pairings]
    assert len(keys) == count * (count - 1) // 2
    assert len(set(keys)) == len(keys)
    assert all(p.home != p.away for p in schedule.pairings)


@pytest.mark.parametrize("count", [4, 5, 6, 9])
def test_no_team_plays_twice_in_a_round(count):
    schedule = generate_round_robin(_teams(count))

    for number in range(1, schedule.round_count + 1):
        seen = []
        for pairing in schedule.pairings_for_round(number):
            seen.extend([pairing.home, pairing.away])
        assert len(seen) == len(set(seen))


def test_odd_field_gives_one_bye_per_round():
    schedule = generate_round_robin(_teams(5))

    assert schedule.round_count == 5
    assert sorted(schedule.byes) == [1, 2, 3, 4, 5]
    # Every team sits out exactly once
    assert sorted(schedule.byes.values()) == _teams(5)
    for number, team in schedule.byes.items():
        playing = {t for p in schedule.pairings_for_round(number) for t in (p.home, p.away)}
        assert team not in playing


def test_return_games_mirror_first_leg():
    teams = _teams(4)
    schedule = generate_round_robin(teams, include_return_games=True)

    assert len(schedule.pairings) == 12
    assert schedule.round_count == 6
    first_leg = {(p.home, p.away, p.round) for p in schedule.pairings if p.round <= 3}
    second_leg = {(p.home, p.away, p.round) for p in schedule.pairings if p.round > 3}
    assert second_leg == {(away, home, r + 3) for home, away, r in first_leg}


def test_schedule_is_deterministic():
    teams = _teams(7)
    assert generate_round_robin(teams) == generate_round_robin(teams)


def test_fewer_than_two_teams_give_empty_schedule():
    assert generate_round_robin(["A"]).pairings == []
    assert generate_round_robin([]).round_count == 0


@pytest.mark.parametrize(
    "count, double, expected",
    [(0, False, 0), (1, True, 0), (4, False, 6), (4, True, 12), (20, True, 380)],
)
def test_total_round_robin_matches(count, double, expected):
    assert total_round_robin_matches(count, double) == expected
