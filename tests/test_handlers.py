import random
from dataclasses import replace

import pytest

from tourneyengine.constants import (
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_ONLY,
    FORMAT_ROUND_ROBIN_FINAL,
    FORMAT_SWISS_SYSTEM,
    MSG_FORCED_REPEAT,
    MSG_MIN_TEAMS,
    MSG_PHASE_NOT_SCHEDULABLE,
    MSG_UNRESOLVED_TIE,
    MSG_WRONG_SETTINGS,
)
from tourneyengine.handlers import GenerationContext, PhaseContext, get_handler
from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.phase import AdvancementRule
from tourneyengine.models.settings import (
    GroupsKnockoutSettings,
    KnockoutSettings,
    LeagueOnlySettings,
    RoundRobinFinalSettings,
    SwissSystemSettings,
)
from tourneyengine.models.standings import StandingsRow
from tourneyengine.models.team import Team
from tourneyengine.pairing.swiss import pairing_key


def _teams(count):
    return [Team(id=f"T{i}", seed=i) for i in range(1, count + 1)]


def _generate(format_key, phase_id, teams, settings=None, **kwargs):
    handler = get_handler(format_key)
    context = GenerationContext(
        phase=handler.phase(phase_id),
        teams=teams,
        settings=settings if settings is not None else handler.settings_class(),
        **kwargs,
    )
    return handler.generate_matches(context)


def _completed(generated, winner="home"):
    """Turn generated fixtures into played matches won by one side."""
    matches = []
    for index, g in enumerate(generated):
        home_score, away_score = (2, 0) if winner == "home" else (0, 2)
        matches.append(
            Match(
                home_team_id=g.home_team_id,
                away_team_id=g.away_team_id,
                stage=g.stage,
                round=g.round,
                status="completed",
                home_score=home_score,
                away_score=away_score,
                id=f"m{index}",
                group=g.group,
                bracket_position=g.bracket_position,
                leg=g.leg,
            )
        )
    return matches


def _context(format_key, phase_id, matches, teams, settings=None, entrants=None):
    handler = get_handler(format_key)
    context = PhaseContext(
        phase=handler.phase(phase_id),
        settings=settings if settings is not None else handler.settings_class(),
        matches=matches,
        teams=teams,
        entrants=entrants,
    )
    context.standings = handler.calculate_standings(context)
    groups = sorted({m.group for m in matches if m.group})
    context.group_standings = {g: handler.calculate_standings(context, group=g) for g in groups}
    return context


# ========== Generation ==========


def test_league_generates_double_round_robin_by_default():
    result = _generate(FORMAT_LEAGUE_ONLY, "regular_season", _teams(4))

    assert result.success
    assert len(result.matches) == 12
    assert {m.stage for m in result.matches} == {"regular_season"}


def test_league_single_round_robin():
    result = _generate(
        FORMAT_LEAGUE_ONLY,
        "regular_season",
        _teams(5),
        LeagueOnlySettings(double_round_robin=False),
    )

    assert len(result.matches) == 10
    assert sorted(result.byes) == ["T1", "T2", "T3", "T4", "T5"]


def test_generation_failures_are_returned():
    handler = get_handler(FORMAT_LEAGUE_ONLY)

    too_few = _generate(FORMAT_LEAGUE_ONLY, "regular_season", _teams(1))
    assert not too_few.success
    assert [e.message_key for e in too_few.errors] == [MSG_MIN_TEAMS]

    start = _generate(FORMAT_LEAGUE_ONLY, "start", _teams(4))
    assert [e.message_key for e in start.errors] == [MSG_PHASE_NOT_SCHEDULABLE]

    wrong = handler.generate_matches(
        GenerationContext(
            phase=handler.phase("regular_season"), teams=_teams(4), settings=KnockoutSettings()
        )
    )
    assert [e.message_key for e in wrong.errors] == [MSG_WRONG_SETTINGS]


@pytest.mark.parametrize("third_place, expected", [(False, 7), (True, 8)])
def test_eight_team_bracket_match_count(third_place, expected):
    handler = get_handler(FORMAT_KNOCKOUT)
    settings = KnockoutSettings(bracket_size=8, third_place_match=third_place)
    teams = _teams(8)

    total = 0
    phase = handler.get_entry_phase(len(teams), settings)
    result = _generate(FORMAT_KNOCKOUT, phase.id, teams, settings)
    pending = [(phase.id, result.matches)]
    while pending:
        phase_id, generated = pending.pop(0)
        total += len(generated)
        context = _context(FORMAT_KNOCKOUT, phase_id, _completed(generated), teams, settings)
        plan = handler.plan_transition(context)
        assert not plan.errors
        for request in plan.requests:
            follow = handler.generate_matches(request.to_context(settings))
            assert follow.success
            pending.append((request.phase.id, follow.matches))

    assert total == expected


def test_knockout_entry_phase_follows_team_count():
    handler = get_handler(FORMAT_KNOCKOUT)
    settings = KnockoutSettings(bracket_size=32)

    assert handler.get_entry_phase(4, settings).id == "semi-final"
    assert handler.get_entry_phase(6, settings).id == "quarter-final"
    assert handler.get_entry_phase(16, settings).id == "round-of-16"
    assert handler.get_entry_phase(20, settings).id == "round-of-32"
    assert handler.get_entry_phase(2, settings).id == "final"


def test_knockout_random_seeding_uses_context_rng():
    settings = KnockoutSettings(seeding_method="random")
    first = _generate(FORMAT_KNOCKOUT, "quarter-final", _teams(8), settings, rng=random.Random(5))
    second = _generate(FORMAT_KNOCKOUT, "quarter-final", _teams(8), settings, rng=random.Random(5))

    assert [(m.home_team_id, m.away_team_id) for m in first.matches] == [
        (m.home_team_id, m.away_team_id) for m in second.matches
    ]


def test_knockout_random_draw_returns_drawn_seeds():
    settings = KnockoutSettings(seeding_method="random")
    result = _generate(FORMAT_KNOCKOUT, "quarter-final", _teams(6), settings, rng=random.Random(3))

    assert sorted(t.id for t in result.entrants) == sorted(t.id for t in _teams(6))
    assert [t.seed for t in result.entrants] == [1, 2, 3, 4, 5, 6]
    # The two best drawn seeds sit out the first round
    assert sorted(result.byes) == sorted(t.id for t in result.entrants[:2])


def test_groups_stage_splits_by_serpentine():
    result = _generate(FORMAT_GROUPS_KNOCKOUT, "group_stage", _teams(16))

    assert result.success
    assert result.groups["group_a"] == ["T1", "T8", "T9", "T16"]
    assert len(result.matches) == 4 * 6
    for match in result.matches:
        assert match.home_team_id in result.groups[match.group]
        assert match.away_team_id in result.groups[match.group]


def test_groups_stage_honours_fixed_assignment():
    assignments = {"group_a": ["T1", "T2"], "group_b": ["T3", "T4"]}
    settings = GroupsKnockoutSettings(group_count=2, teams_per_group=2, advancing_per_group=1)
    result = _generate(
        FORMAT_GROUPS_KNOCKOUT, "group_stage", _teams(4), settings, group_assignments=assignments
    )

    assert {(m.group, m.pair_key) for m in map(GeneratedMatch.to_match, result.matches)} == {
        ("group_a", frozenset({"T1", "T2"})),
        ("group_b", frozenset({"T3", "T4"})),
    }


def test_swiss_round_reports_forced_repeats():
    played = {pairing_key("T1", "T2"), pairing_key("T1", "T3"), pairing_key("T1", "T4")}
    result = _generate(
        FORMAT_SWISS_SYSTEM,
        "regular_season",
        _teams(4),
        round=4,
        played_pairs=played,
    )

    assert result.success
    assert len(result.forced_repeats) == 1
    assert [w.message_key for w in result.warnings] == [MSG_FORCED_REPEAT]
    assert {m.round for m in result.matches} == {4}


def test_swiss_poule_uses_swiss_rounds_when_configured():
    settings = SwissSystemSettings(poule_format="swiss")
    result = _generate(FORMAT_SWISS_SYSTEM, "poule_a", _teams(4), settings)

    assert len(result.matches) == 2


def test_round_robin_final_playoff_legs():
    settings = RoundRobinFinalSettings(playoff_format="home_away")
    result = _generate(FORMAT_ROUND_ROBIN_FINAL, "semi-final", _teams(4), settings)

    assert len(result.matches) == 4
    assert sorted(m.leg for m in result.matches) == [1, 1, 2, 2]


# ========== Phase graph ==========


def test_semi_final_leads_to_third_place_when_enabled():
    handler = get_handler(FORMAT_KNOCKOUT)
    with_third = _context(FORMAT_KNOCKOUT, "semi-final", [], _teams(4))
    without = _context(
        FORMAT_KNOCKOUT, "semi-final", [], _teams(4), KnockoutSettings(third_place_match=False)
    )

    assert handler.get_next_phase(with_third).id == "third-place_playoff"
    assert handler.get_next_phase(without).id == "final"


def test_round_robin_final_enters_playoff_by_size():
    handler = get_handler(FORMAT_ROUND_ROBIN_FINAL)
    for playoff_teams, phase_id in [(8, "quarter-final"), (4, "semi-final"), (2, "final")]:
        settings = RoundRobinFinalSettings(playoff_teams=playoff_teams)
        context = _context(FORMAT_ROUND_ROBIN_FINAL, "regular_season", [], _teams(8), settings)
        assert handler.get_next_phase(context).id == phase_id


def test_advancing_teams_union_without_duplicates():
    handler = get_handler(FORMAT_LEAGUE_ONLY)
    standings = [StandingsRow(team_id=t) for t in "ABCDE"]
    rules = [
        AdvancementRule(3, "top", "x"),
        AdvancementRule(3, "bottom", "y"),
    ]

    assert handler.get_advancing_teams(standings, rules) == ["A", "B", "C", "D", "E"]


def test_knockout_advancing_means_winners():
    handler = get_handler(FORMAT_KNOCKOUT)
    standings = [
        StandingsRow(team_id="A", wins=1),
        StandingsRow(team_id="B", losses=1),
    ]

    assert handler.get_advancing_teams(standings, []) == ["A"]


# ========== Transitions ==========


def test_groups_send_winners_crossed_into_bracket():
    teams = _teams(8)
    settings = GroupsKnockoutSettings(group_count=2, teams_per_group=4, advancing_per_group=2)
    generated = _generate(FORMAT_GROUPS_KNOCKOUT, "group_stage", teams, settings).matches
    context = _context(FORMAT_GROUPS_KNOCKOUT, "group_stage", _completed(generated), teams, settings)

    plan = get_handler(FORMAT_GROUPS_KNOCKOUT).plan_transition(context)

    assert not plan.errors
    (request,) = plan.requests
    assert request.phase.id == "knockout"
    winners_a = [r.team_id for r in context.group_standings["group_a"][:2]]
    winners_b = [r.team_id for r in context.group_standings["group_b"][:2]]
    assert [t.id for t in request.teams] == winners_a + winners_b
    assert [t.seed for t in request.teams] == [1, 2, 3, 4]


def test_two_advancing_teams_go_straight_to_final():
    teams = _teams(4)
    settings = GroupsKnockoutSettings(group_count=2, teams_per_group=2, advancing_per_group=1)
    generated = _generate(FORMAT_GROUPS_KNOCKOUT, "group_stage", teams, settings).matches
    context = _context(FORMAT_GROUPS_KNOCKOUT, "group_stage", _completed(generated), teams, settings)

    plan = get_handler(FORMAT_GROUPS_KNOCKOUT).plan_transition(context)

    assert [r.phase.id for r in plan.requests] == ["final"]


def test_semi_finals_create_third_place_and_final():
    teams = _teams(4)
    generated = _generate(FORMAT_KNOCKOUT, "semi-final", teams).matches
    context = _context(FORMAT_KNOCKOUT, "semi-final", _completed(generated), teams, entrants=teams)

    plan = get_handler(FORMAT_KNOCKOUT).plan_transition(context)

    assert [r.phase.id for r in plan.requests] == ["third-place_playoff", "final"]
    third, final = plan.requests
    assert {t.id for t in final.teams} == {"T1", "T3"}
    assert {t.id for t in third.teams} == {"T2", "T4"}


def test_bracket_round_with_byes_feeds_next_phase():
    teams = _teams(6)
    settings = KnockoutSettings(bracket_size=8)
    generated = _generate(FORMAT_KNOCKOUT, "quarter-final", teams, settings).matches
    assert len(generated) == 2
    context = _context(
        FORMAT_KNOCKOUT, "quarter-final", _completed(generated), teams, settings, entrants=teams
    )

    plan = get_handler(FORMAT_KNOCKOUT).plan_transition(context)

    (request,) = plan.requests
    assert request.phase.id == "semi-final"
    ids = [t.id for t in request.teams]
    assert len(ids) == 4
    # Top seeds had byes and stay on opposite sides of the bracket
    assert ids[0] == "T1"
    assert ids[-1] == "T2"


def test_round_of_32_winners_enter_round_of_16():
    teams = _teams(32)
    settings = KnockoutSettings(bracket_size=32)
    generated = _generate(FORMAT_KNOCKOUT, "round-of-32", teams, settings).matches
    context = _context(
        FORMAT_KNOCKOUT, "round-of-32", _completed(generated), teams, settings, entrants=teams
    )

    plan = get_handler(FORMAT_KNOCKOUT).plan_transition(context)

    (request,) = plan.requests
    assert request.phase.id == "round-of-16"
    assert len(request.teams) == 16


def test_best_of_three_split_series_gets_decider():
    teams = _teams(2)
    settings = RoundRobinFinalSettings(playoff_teams=2, playoff_format="best_of_3")
    legs = _generate(FORMAT_ROUND_ROBIN_FINAL, "final", teams, settings).matches
    played = _completed(legs)  # home side wins each leg, so one leg each
    context = _context(FORMAT_ROUND_ROBIN_FINAL, "final", played, teams, settings)

    plan = get_handler(FORMAT_ROUND_ROBIN_FINAL).plan_transition(context)

    assert not plan.phase_closed
    (decider,) = plan.extra_matches
    assert decider.leg == 3
    assert decider.bracket_position == 0


def test_drawn_knockout_match_blocks_the_close():
    teams = _teams(2)
    match = Match(
        "T1", "T2", "final", 1, status="completed", home_score=1, away_score=1, bracket_position=0
    )
    context = _context(FORMAT_KNOCKOUT, "final", [match], teams)

    plan = get_handler(FORMAT_KNOCKOUT).plan_transition(context)

    assert [e.message_key for e in plan.errors] == [MSG_UNRESOLVED_TIE]


def test_swiss_continues_until_phase_one_rounds_are_played():
    teams = _teams(8)
    settings = SwissSystemSettings(phase1_rounds=2)
    round_one = _generate(FORMAT_SWISS_SYSTEM, "regular_season", teams, settings).matches
    context = _context(
        FORMAT_SWISS_SYSTEM, "regular_season", _completed(round_one), teams, settings, entrants=teams
    )
    handler = get_handler(FORMAT_SWISS_SYSTEM)

    plan = handler.plan_transition(context)
    assert not plan.phase_closed
    (request,) = plan.requests
    assert request.phase.id == "regular_season"
    assert request.round == 2
    assert len(request.played_pairs) == 4

    round_two = handler.generate_matches(request.to_context(settings)).matches
    assert not {frozenset((m.home_team_id, m.away_team_id)) for m in round_two} & request.played_pairs
    context.matches.extend(
        replace(match, id=f"r2_{index}") for index, match in enumerate(_completed(round_two))
    )
    context.standings = handler.calculate_standings(context)

    split = handler.plan_transition(context)
    assert split.phase_closed
    assert sorted(r.phase.id for r in split.requests) == ["poule_a", "poule_b"]
    ranking = [r.team_id for r in context.standings]
    poule_a = next(r for r in split.requests if r.phase.id == "poule_a")
    assert [t.id for t in poule_a.teams] == [ranking[0], ranking[3], ranking[4], ranking[7]]


def test_poule_a_sends_top_teams_to_final_and_poule_b_ends():
    teams = _teams(4)
    settings = SwissSystemSettings(final_stage_teams=2)
    handler = get_handler(FORMAT_SWISS_SYSTEM)
    generated = _generate(FORMAT_SWISS_SYSTEM, "poule_a", teams, settings).matches
    context = _context(FORMAT_SWISS_SYSTEM, "poule_a", _completed(generated), teams, settings)

    plan = handler.plan_transition(context)
    (request,) = plan.requests
    assert request.phase.id == "final"
    assert [t.id for t in request.teams] == [r.team_id for r in context.standings[:2]]

    poule_b = _context(FORMAT_SWISS_SYSTEM, "poule_b", _completed(generated), teams, settings)
    assert handler.plan_transition(poule_b).requests == []


def test_league_top_teams_enter_playoff():
    teams = _teams(6)
    settings = RoundRobinFinalSettings(double_round_robin=False, playoff_teams=4)
    generated = _generate(FORMAT_ROUND_ROBIN_FINAL, "regular_season", teams, settings).matches
    context = _context(
        FORMAT_ROUND_ROBIN_FINAL, "regular_season", _completed(generated), teams, settings
    )

    plan = get_handler(FORMAT_ROUND_ROBIN_FINAL).plan_transition(context)

    (request,) = plan.requests
    assert request.phase.id == "semi-final"
    assert [t.id for t in request.teams] == [r.team_id for r in context.standings[:4]]
