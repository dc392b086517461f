import random

import pytest

from tourneyengine.constants import (
    PLAYOFF_BEST_OF_3,
    PLAYOFF_HOME_AWAY,
    PLAYOFF_SINGLE_MATCH,
    SEEDING_MANUAL,
    SEEDING_RANDOM,
    SEEDING_SEEDED,
)
from tourneyengine.exceptions import InvalidSeedingMethodException
from tourneyengine.models.match import Match
from tourneyengine.models.team import Team
from tourneyengine.pairing.knockout import (
    arrange_bracket_seeding,
    generate_knockout_pairings,
    knockout_stage_name,
    playoff_legs,
    resolve_ties,
)


def _seeded(count):
    return [Team(id=f"S{i}", seed=i) for i in range(1, count + 1)]


def _pairs(pairings):
    return [frozenset((p.home, p.away)) for p in pairings if not p.is_bye]


def _leg(home, away, home_score, away_score, position=0, leg=None):
    return Match(
        home_team_id=home,
        away_team_id=away,
        stage="semi-final",
        round=1,
        status="completed",
        home_score=home_score,
        away_score=away_score,
        bracket_position=position,
        leg=leg,
    )


def test_four_seeds_pair_one_four_and_two_three():
    pairings = generate_knockout_pairings(_seeded(4), SEEDING_SEEDED)

    assert _pairs(pairings) == [frozenset({"S1", "S4"}), frozenset({"S2", "S3"})]
    assert [p.position for p in pairings] == [0, 1]


def test_eight_seeds_use_standard_positions():
    slots = arrange_bracket_seeding(_seeded(8))

    assert [t.id for t in slots] == ["S1", "S8", "S5", "S4", "S3", "S6", "S7", "S2"]


@pytest.mark.parametrize("size", [2, 4, 8, 16, 32])
def test_top_two_seeds_only_meet_in_final(size):
    slots = arrange_bracket_seeding(_seeded(size))
    ids = [t.id for t in slots]

    # Seed 1 and seed 2 are in opposite halves of the bracket
    assert ids.index("S1") < size // 2 <= ids.index("S2")
    # Seed 1 opens against the lowest seed
    assert ids[1] == f"S{size}"


def test_short_field_gives_byes_to_top_seeds():
    pairings = generate_knockout_pairings(_seeded(6), SEEDING_SEEDED)

    byes = [p.bye_team for p in pairings if p.is_bye]
    assert sorted(byes) == ["S1", "S2"]
    assert len(_pairs(pairings)) == 2


def test_unseeded_teams_default_to_list_order():
    teams = [Team(id=name) for name in "ABCD"]
    pairings = generate_knockout_pairings(teams, SEEDING_SEEDED)

    assert _pairs(pairings) == [frozenset({"A", "D"}), frozenset({"B", "C"})]


def test_random_seeding_is_reproducible_with_seeded_rng():
    teams = _seeded(8)
    first = generate_knockout_pairings(teams, SEEDING_RANDOM, random.Random(42))
    second = generate_knockout_pairings(teams, SEEDING_RANDOM, random.Random(42))

    assert first == second
    assert sorted(t for p in first for t in (p.home, p.away)) == sorted(t.id for t in teams)


def test_manual_seeding_keeps_given_order():
    teams = [Team(id=name) for name in "DCBA"]
    pairings = generate_knockout_pairings(teams, SEEDING_MANUAL)

    assert [(p.home, p.away) for p in pairings] == [("D", "C"), ("B", "A")]


def test_preserve_order_pairs_consecutive_teams():
    teams = [Team(id=name) for name in "ABC"]
    pairings = generate_knockout_pairings(teams, preserve_order=True)

    assert [(p.home, p.away) for p in pairings] == [("A", "B"), ("C", None)]
    assert pairings[1].bye_team == "C"


def test_unknown_seeding_method_raises():
    with pytest.raises(InvalidSeedingMethodException):
        generate_knockout_pairings(_seeded(4), "alphabetical")


def test_playoff_legs_per_format():
    assert playoff_legs("A", "B", PLAYOFF_SINGLE_MATCH) == [("A", "B", None)]
    assert playoff_legs("A", "B", PLAYOFF_HOME_AWAY) == [("A", "B", 1), ("B", "A", 2)]
    assert playoff_legs("A", "B", PLAYOFF_BEST_OF_3) == [("A", "B", 1), ("B", "A", 2)]


def test_knockout_stage_names():
    assert knockout_stage_name(2) == "final"
    assert knockout_stage_name(4) == "semi-final"
    assert knockout_stage_name(8) == "quarter-final"
    assert knockout_stage_name(64) == "round-of-64"


def test_single_match_tie_goes_to_winner():
    (tie,) = resolve_ties([_leg("A", "B", 1, 2)])

    assert tie.winner == "B"
    assert tie.loser == "A"


def test_drawn_single_match_stays_unresolved():
    (tie,) = resolve_ties([_leg("A", "B", 1, 1)])

    assert not tie.resolved
    assert not tie.needs_decider


def test_home_away_uses_aggregate_goals():
    aggregate = resolve_ties(
        [_leg("A", "B", 3, 0, leg=1), _leg("B", "A", 2, 1, leg=2)], PLAYOFF_HOME_AWAY
    )
    assert aggregate[0].winner == "A"

    level = resolve_ties(
        [_leg("A", "B", 2, 1, leg=1), _leg("B", "A", 1, 0, leg=2)], PLAYOFF_HOME_AWAY
    )
    assert not level[0].resolved


def test_best_of_three_needs_decider_after_split_legs():
    split = resolve_ties(
        [_leg("A", "B", 2, 0, leg=1), _leg("B", "A", 2, 0, leg=2)], PLAYOFF_BEST_OF_3
    )
    assert split[0].needs_decider
    assert not split[0].resolved

    decided = resolve_ties(
        [
            _leg("A", "B", 2, 0, leg=1),
            _leg("B", "A", 2, 0, leg=2),
            _leg("A", "B", 0, 1, leg=3),
        ],
        PLAYOFF_BEST_OF_3,
    )
    assert decided[0].winner == "B"


def test_best_of_three_two_straight_wins():
    (tie,) = resolve_ties(
        [_leg("A", "B", 2, 0, leg=1), _leg("B", "A", 0, 1, leg=2)], PLAYOFF_BEST_OF_3
    )
    assert tie.winner == "A"
    assert tie.legs_played == 2


def test_ties_come_back_in_bracket_order():
    ties = resolve_ties([_leg("C", "D", 1, 0, position=1), _leg("A", "B", 1, 0, position=0)])

    assert [t.winner for t in ties] == ["A", "C"]
