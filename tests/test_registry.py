import pytest

from tourneyengine.constants import (
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_ONLY,
    FORMAT_ROUND_ROBIN_FINAL,
    FORMAT_SWISS_SYSTEM,
    PHASE_START,
)
from tourneyengine.exceptions import PhaseNotFoundException, UnknownFormatException
from tourneyengine.formats.registry import (
    FORMAT_DEFINITIONS,
    get_default_settings,
    get_format_definition,
    get_next_phase,
    get_phase_by_id,
    get_phases,
    get_phases_at_order,
    get_schedulable_phases,
    normalize_format_key,
)
from tourneyengine.handlers import HANDLERS, get_handler
from tourneyengine.models.settings import KnockoutSettings, SwissSystemSettings

ALL_FORMATS = [
    FORMAT_LEAGUE_ONLY,
    FORMAT_KNOCKOUT,
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_SWISS_SYSTEM,
    FORMAT_ROUND_ROBIN_FINAL,
]


def _ids(phases):
    return [p.id for p in phases]


@pytest.mark.parametrize("format_key", ALL_FORMATS)
def test_every_format_starts_with_unplayable_start(format_key):
    phases = get_phases(format_key)

    assert phases[0].id == PHASE_START
    assert phases[0].order == 0
    assert PHASE_START not in _ids(get_schedulable_phases(format_key))


@pytest.mark.parametrize("format_key", ALL_FORMATS)
def test_advancement_targets_exist(format_key):
    ids = set(_ids(get_phases(format_key)))
    for phase in get_phases(format_key):
        for rule in phase.advancement_rules:
            assert rule.to_phase in ids


@pytest.mark.parametrize("format_key", ALL_FORMATS)
def test_every_format_has_a_handler(format_key):
    assert get_handler(format_key).format_key == format_key
    assert set(HANDLERS) == set(FORMAT_DEFINITIONS)


def test_knockout_phase_graph():
    assert _ids(get_schedulable_phases(FORMAT_KNOCKOUT)) == [
        "round-of-32",
        "round-of-16",
        "quarter-final",
        "semi-final",
        "third-place_playoff",
        "final",
    ]
    assert get_phase_by_id(FORMAT_KNOCKOUT, "final").is_terminal
    assert get_phase_by_id(FORMAT_KNOCKOUT, "third-place_playoff").is_terminal


def test_swiss_poules_share_an_order():
    poules = get_phases_at_order(FORMAT_SWISS_SYSTEM, 2)

    assert sorted(_ids(poules)) == ["poule_a", "poule_b"]
    rules = get_phase_by_id(FORMAT_SWISS_SYSTEM, "regular_season").advancement_rules
    assert [(r.from_, r.to_phase) for r in rules] == [("top", "poule_a"), ("bottom", "poule_b")]


def test_next_phase_by_order():
    assert get_next_phase(FORMAT_LEAGUE_ONLY, "start").id == "regular_season"
    assert get_next_phase(FORMAT_LEAGUE_ONLY, "regular_season") is None
    assert get_next_phase(FORMAT_GROUPS_KNOCKOUT, "group_stage").id == "knockout"


def test_legacy_names_are_accepted():
    assert normalize_format_key("generate_playoffs") == FORMAT_SWISS_SYSTEM
    assert normalize_format_key(None) == FORMAT_LEAGUE_ONLY
    assert get_phase_by_id(FORMAT_SWISS_SYSTEM, "Fase 2").id == "poule_a"


def test_unknown_lookups_raise():
    with pytest.raises(UnknownFormatException):
        get_format_definition("ladder")
    with pytest.raises(UnknownFormatException):
        get_handler("ladder")
    with pytest.raises(PhaseNotFoundException):
        get_phase_by_id(FORMAT_LEAGUE_ONLY, "final")


def test_default_settings_per_format():
    knockout = get_default_settings(FORMAT_KNOCKOUT)
    assert isinstance(knockout, KnockoutSettings)
    assert (knockout.bracket_size, knockout.seeding_method, knockout.third_place_match) == (
        8,
        "seeded",
        True,
    )

    swiss = get_default_settings(FORMAT_SWISS_SYSTEM)
    assert isinstance(swiss, SwissSystemSettings)
    assert swiss.snake_seeding_pattern == [[1, 4, 5, 8], [2, 3, 6, 7]]


def test_definition_serializes_phases_and_defaults():
    data = get_format_definition(FORMAT_ROUND_ROBIN_FINAL).to_dict()

    assert data["key"] == FORMAT_ROUND_ROBIN_FINAL
    assert data["defaultSettings"]["playoffTeams"] == 4
    assert [p["id"] for p in data["phases"]][0] == "start"
