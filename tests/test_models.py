from datetime import timezone

import pytest

from tourneyengine.constants import FORMAT_GROUPS_KNOCKOUT, FORMAT_SWISS_SYSTEM
from tourneyengine.exceptions import InvalidSettingsException, UnknownFormatException
from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.override import ManualOverride, MatchResolution
from tourneyengine.models.settings import (
    GroupsKnockoutSettings,
    SwissSystemSettings,
    settings_from_dict,
)
from tourneyengine.models.standings import StandingsRow, StandingsSnapshot


def test_settings_read_camel_case_keys():
    settings = settings_from_dict(
        FORMAT_SWISS_SYSTEM,
        {"phase1Rounds": 5, "pouleFormat": "swiss", "pointsPerWin": 2},
    )

    assert isinstance(settings, SwissSystemSettings)
    assert settings.phase1_rounds == 5
    assert settings.poule_format == "swiss"
    assert settings.points_per_win == 2
    assert settings.final_stage_teams == 4


def test_nested_knockout_settings():
    settings = settings_from_dict(
        FORMAT_GROUPS_KNOCKOUT, {"knockoutSettings": {"seedingMethod": "random"}}
    )

    assert isinstance(settings, GroupsKnockoutSettings)
    assert settings.knockout_settings.seeding_method == "random"
    assert settings.to_dict()["knockoutSettings"]["seedingMethod"] == "random"

    with pytest.raises(InvalidSettingsException):
        settings_from_dict(FORMAT_GROUPS_KNOCKOUT, {"knockoutSettings": [8]})


def test_unknown_format_settings():
    with pytest.raises(UnknownFormatException):
        settings_from_dict("ladder", {})


def test_match_winner_and_result():
    match = Match("A", "B", "final", 1, bracket_position=0)

    assert match.is_open
    assert match.winner_id is None

    played = match.with_result(0, 3)
    assert played.winner_id == "B"
    assert played.loser_id == "A"
    assert played.goals_for("B") == (3, 0)
    assert match.status == "scheduled"


def test_match_dict_keeps_optional_fields():
    match = Match.from_dict(
        {"id": 7, "home_team_id": 1, "away_team_id": 2, "stage": "poule_a", "group": "poule_a"}
    )

    assert (match.home_team_id, match.away_team_id) == ("1", "2")
    assert match.to_dict()["group"] == "poule_a"
    assert "leg" not in GeneratedMatch("1", "2", "final", 1).to_dict()


def test_manual_override_from_dict():
    override = ManualOverride.from_dict(
        {
            "resolved_matches": {
                "m1": {"resolution": "result", "home_score": 2, "away_score": 1},
                "m2": {"resolution": "freeze"},
            },
            "tie_breakers": {"points": ["B", "A"]},
        }
    )

    assert override.resolution_for("m1").home_score == 2
    assert override.resolution_for("m2").resolution == "freeze"
    assert override.resolution_for(None) is None
    assert override.tie_order == ["B", "A"]
    assert ManualOverride.from_dict(None).resolved_matches == {}


def test_bad_resolutions_are_rejected():
    with pytest.raises(ValueError):
        MatchResolution("forfeit")
    with pytest.raises(ValueError):
        MatchResolution("result", home_score=1)


def test_snapshot_timestamp_parsing():
    snapshot = StandingsSnapshot.from_dict(
        {
            "season_id": "s1",
            "phase_name": "regular_season",
            "snapshot_data": {"overall": []},
            "taken_at": "2025-05-01T18:30:00",
        }
    )

    assert snapshot.taken_at.tzinfo == timezone.utc
    assert snapshot.taken_at.hour == 18
    assert StandingsSnapshot.from_dict(snapshot.to_dict()).taken_at == snapshot.taken_at


def test_snapshot_keeps_group_rows():
    snapshot = StandingsSnapshot.from_rows(
        "s1",
        "group_stage",
        [StandingsRow(team_id="A", points=3)],
        {"group_a": [StandingsRow(team_id="A", points=3)]},
    )

    assert set(snapshot.snapshot_data) == {"overall", "group_a"}
    assert snapshot.snapshot_data["group_a"][0]["team_id"] == "A"
