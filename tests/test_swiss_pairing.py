from tourneyengine.models.match import Match
from tourneyengine.pairing.swiss import (
    generate_swiss_pairings,
    pairing_key,
    played_pairs_from_matches,
    rank_teams,
)


def _played(*pairs):
    return {pairing_key(a, b) for a, b in pairs}


def _keys(result):
    return [frozenset(p) for p in result.pairings]


def test_first_round_pairs_neighbours_in_ranking():
    result = generate_swiss_pairings(["A", "B", "C", "D"], ranking=["A", "B", "C", "D"])

    assert _keys(result) == [frozenset("AB"), frozenset("CD")]
    assert result.bye is None
    assert result.forced_repeats == []


def test_played_opponent_is_skipped_for_next_nearest():
    result = generate_swiss_pairings(
        ["A", "B", "C", "D"],
        ranking=["A", "B", "C", "D"],
        played_pairs=_played(("A", "B"), ("C", "D")),
    )

    assert _keys(result) == [frozenset("AC"), frozenset("BD")]
    assert result.forced_repeats == []


def test_greedy_pairing_is_kept_when_it_repeats_nothing():
    result = generate_swiss_pairings(
        list("ABCDEF"),
        ranking="ABCDEF",
        played_pairs=_played(("A", "B"), ("D", "E")),
    )

    assert _keys(result) == [frozenset("AC"), frozenset("BD"), frozenset("EF")]
    assert result.forced_repeats == []


def test_search_backtracks_instead_of_leaving_last_pair_repeated():
    # Greedy A-B would leave C-D, which already met
    result = generate_swiss_pairings(
        ["A", "B", "C", "D"],
        ranking=["A", "B", "C", "D"],
        played_pairs=_played(("C", "D")),
    )

    assert result.forced_repeats == []
    assert frozenset("CD") not in _keys(result)
    assert frozenset("AC") in _keys(result)


def test_forced_repeat_is_reported_when_unavoidable():
    played = _played(("A", "B"), ("A", "C"), ("A", "D"))
    result = generate_swiss_pairings(["A", "B", "C", "D"], ranking="ABCD", played_pairs=played)

    assert len(result.pairings) == 2
    assert len(result.forced_repeats) == 1
    assert "A" in result.forced_repeats[0]


def test_odd_field_gives_bye_to_lowest_without_previous_bye():
    result = generate_swiss_pairings(
        ["A", "B", "C", "D", "E"], ranking="ABCDE", previous_byes={"E"}
    )

    assert result.bye == "D"
    paired = {t for pair in result.pairings for t in pair}
    assert paired == {"A", "B", "C", "E"}


def test_every_team_paired_once():
    teams = [f"T{i}" for i in range(10)]
    result = generate_swiss_pairings(teams, ranking=teams)

    paired = [t for pair in result.pairings for t in pair]
    assert sorted(paired) == sorted(teams)


def test_home_side_follows_ranking_parity():
    result = generate_swiss_pairings(["A", "B", "C", "D"], ranking="ABCD")

    # A is ranked first (even index) and hosts; C is ranked third and hosts
    assert result.pairings == [("A", "B"), ("C", "D")]


def test_rank_teams_puts_unranked_last_in_input_order():
    assert rank_teams(["X", "A", "Y", "B"], ["B", "A"]) == ["B", "A", "X", "Y"]


def test_played_pairs_ignore_cancelled_matches():
    matches = [
        Match("A", "B", "regular_season", 1, status="completed", home_score=1, away_score=0),
        Match("C", "D", "regular_season", 1, status="cancelled"),
    ]

    assert played_pairs_from_matches(matches) == {frozenset("AB")}
