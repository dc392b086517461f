"""Static definitions of the supported tournament formats.

Each format is an ordered set of phases. Every format opens with a
non-playable ``start`` phase that stands for the season before any match
exists. The table is built once at import time and never changes.
"""

# Tourney Engine
# Copyright (C) 2025  Tourney Engine developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from tourneyengine.constants import (
    ADVANCE_BOTTOM,
    ADVANCE_TOP,
    DEFAULT_FORMAT,
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_ONLY,
    FORMAT_ROUND_ROBIN_FINAL,
    FORMAT_SWISS_SYSTEM,
    GEN_GROUP_ASSIGNMENT,
    GEN_KNOCKOUT,
    GEN_ROUND_ROBIN,
    GEN_SWISS_PAIRING,
    LEGACY_FORMAT_KEYS,
    LEGACY_PHASE_IDS,
    PHASE_FINAL,
    PHASE_GROUP_STAGE,
    PHASE_KNOCKOUT,
    PHASE_POULE_A,
    PHASE_POULE_B,
    PHASE_QUARTER_FINAL,
    PHASE_REGULAR_SEASON,
    PHASE_ROUND_OF_16,
    PHASE_ROUND_OF_32,
    PHASE_SEMI_FINAL,
    PHASE_START,
    PHASE_THIRD_PLACE,
)
from tourneyengine.exceptions import PhaseNotFoundException, UnknownFormatException
from tourneyengine.models.phase import AdvancementRule, MatchGenerationConfig, PhaseConfig
from tourneyengine.models.settings import (
    SETTINGS_CLASSES,
    TournamentModeSettings,
    default_settings,
)


@dataclass(frozen=True)
class FormatDefinition:
    """Phases and metadata of one tournament format."""

    key: str
    name_key: str
    description_key: str
    phases: Tuple[PhaseConfig, ...]
    settings_class: Type

    def to_dict(self) -> Dict:
        return {
            "key": self.key,
            "nameKey": self.name_key,
            "descriptionKey": self.description_key,
            "phases": [p.to_dict() for p in self.phases],
            "defaultSettings": self.settings_class().to_dict(),
        }


def _phase(
    phase_id: str,
    order: int,
    generation: str,
    rules: Tuple[AdvancementRule, ...] = (),
    terminal: bool = False,
    include_return_games: Optional[bool] = None,
    bracket_size: Optional[int] = None,
) -> PhaseConfig:
    return PhaseConfig(
        id=phase_id,
        name_key=f"tournament.phases.{phase_id}",
        order=order,
        match_generation=MatchGenerationConfig(
            type=generation,
            include_return_games=include_return_games,
            bracket_size=bracket_size,
        ),
        advancement_rules=rules,
        is_terminal=terminal,
    )


def _start(generation: str = GEN_ROUND_ROBIN) -> PhaseConfig:
    return _phase(PHASE_START, 0, generation)


def _definition(key: str, phases: Tuple[PhaseConfig, ...]) -> FormatDefinition:
    return FormatDefinition(
        key=key,
        name_key=f"tournament.formats.{key}.name",
        description_key=f"tournament.formats.{key}.description",
        phases=phases,
        settings_class=SETTINGS_CLASSES[key],
    )


FORMAT_DEFINITIONS: Dict[str, FormatDefinition] = {
    FORMAT_LEAGUE_ONLY: _definition(
        FORMAT_LEAGUE_ONLY,
        (
            _start(),
            _phase(PHASE_REGULAR_SEASON, 1, GEN_ROUND_ROBIN, terminal=True),
        ),
    ),
    FORMAT_KNOCKOUT: _definition(
        FORMAT_KNOCKOUT,
        (
            _start(GEN_KNOCKOUT),
            _phase(PHASE_ROUND_OF_32, 1, GEN_KNOCKOUT, bracket_size=32),
            _phase(PHASE_ROUND_OF_16, 2, GEN_KNOCKOUT, bracket_size=16),
            _phase(PHASE_QUARTER_FINAL, 3, GEN_KNOCKOUT, bracket_size=8),
            _phase(PHASE_SEMI_FINAL, 4, GEN_KNOCKOUT, bracket_size=4),
            _phase(PHASE_THIRD_PLACE, 5, GEN_KNOCKOUT, terminal=True, bracket_size=2),
            _phase(PHASE_FINAL, 6, GEN_KNOCKOUT, terminal=True, bracket_size=2),
        ),
    ),
    FORMAT_GROUPS_KNOCKOUT: _definition(
        FORMAT_GROUPS_KNOCKOUT,
        (
            _start(GEN_GROUP_ASSIGNMENT),
            _phase(
                PHASE_GROUP_STAGE,
                1,
                GEN_ROUND_ROBIN,
                rules=(AdvancementRule(2, ADVANCE_TOP, PHASE_KNOCKOUT),),
            ),
            _phase(PHASE_KNOCKOUT, 2, GEN_KNOCKOUT),
            _phase(PHASE_FINAL, 3, GEN_KNOCKOUT, terminal=True, bracket_size=2),
        ),
    ),
    FORMAT_SWISS_SYSTEM: _definition(
        FORMAT_SWISS_SYSTEM,
        (
            _start(GEN_SWISS_PAIRING),
            _phase(
                PHASE_REGULAR_SEASON,
                1,
                GEN_SWISS_PAIRING,
                rules=(
                    AdvancementRule(4, ADVANCE_TOP, PHASE_POULE_A),
                    AdvancementRule(4, ADVANCE_BOTTOM, PHASE_POULE_B),
                ),
            ),
            _phase(
                PHASE_POULE_A,
                2,
                GEN_ROUND_ROBIN,
                rules=(AdvancementRule(2, ADVANCE_TOP, PHASE_FINAL),),
            ),
            _phase(PHASE_POULE_B, 2, GEN_ROUND_ROBIN, terminal=True),
            _phase(PHASE_FINAL, 3, GEN_KNOCKOUT, terminal=True),
        ),
    ),
    FORMAT_ROUND_ROBIN_FINAL: _definition(
        FORMAT_ROUND_ROBIN_FINAL,
        (
            _start(),
            _phase(
                PHASE_REGULAR_SEASON,
                1,
                GEN_ROUND_ROBIN,
                rules=(AdvancementRule(4, ADVANCE_TOP, PHASE_SEMI_FINAL),),
            ),
            _phase(PHASE_QUARTER_FINAL, 2, GEN_KNOCKOUT, bracket_size=8),
            _phase(
                PHASE_SEMI_FINAL,
                3,
                GEN_KNOCKOUT,
                rules=(AdvancementRule(2, ADVANCE_TOP, PHASE_FINAL),),
                bracket_size=4,
            ),
            _phase(PHASE_THIRD_PLACE, 4, GEN_KNOCKOUT, terminal=True, bracket_size=2),
            _phase(PHASE_FINAL, 5, GEN_KNOCKOUT, terminal=True, bracket_size=2),
        ),
    ),
}


# ========== Lookups ==========


def is_valid_format_key(format_key: str) -> bool:
    return format_key in FORMAT_DEFINITIONS


def normalize_format_key(format_key: Optional[str]) -> str:
    """Map stored keys, including legacy ones, onto a known format key.

    Unknown or missing keys fall back to the league format.
    """
    if format_key in FORMAT_DEFINITIONS:
        return format_key
    return LEGACY_FORMAT_KEYS.get(format_key or "", DEFAULT_FORMAT)


def normalize_phase_id(phase_id: str) -> str:
    """Map legacy phase names onto phase ids; other ids pass through."""
    return LEGACY_PHASE_IDS.get(phase_id, phase_id)


def get_format_definition(format_key: str) -> FormatDefinition:
    """Get a format definition.

    Raises:
        UnknownFormatException: If no format has this key
    """
    try:
        return FORMAT_DEFINITIONS[format_key]
    except KeyError:
        raise UnknownFormatException(format_key) from None


def get_all_definitions() -> List[FormatDefinition]:
    return list(FORMAT_DEFINITIONS.values())


def get_default_settings(format_key: str) -> TournamentModeSettings:
    get_format_definition(format_key)
    return default_settings(format_key)


def get_phases(format_key: str) -> List[PhaseConfig]:
    """Phases of a format sorted by order."""
    return sorted(get_format_definition(format_key).phases, key=lambda p: p.order)


def get_phase_by_id(format_key: str, phase_id: str) -> PhaseConfig:
    """Look up a phase, accepting legacy phase names.

    Raises:
        UnknownFormatException: If the format is unknown
        PhaseNotFoundException: If the format has no such phase
    """
    phase_id = normalize_phase_id(phase_id)
    for phase in get_format_definition(format_key).phases:
        if phase.id == phase_id:
            return phase
    raise PhaseNotFoundException(format_key, phase_id)


def find_phase(format_key: str, phase_id: str) -> Optional[PhaseConfig]:
    """Like get_phase_by_id, but None for an unknown phase."""
    try:
        return get_phase_by_id(format_key, phase_id)
    except PhaseNotFoundException:
        return None


def get_phases_at_order(format_key: str, order: int) -> List[PhaseConfig]:
    return [p for p in get_phases(format_key) if p.order == order]


def get_next_phase(format_key: str, phase_id: str) -> Optional[PhaseConfig]:
    """First phase with the next higher order, None after a terminal phase."""
    current = get_phase_by_id(format_key, phase_id)
    if current.is_terminal:
        return None
    for phase in get_phases(format_key):
        if phase.order > current.order:
            return phase
    return None


def get_schedulable_phases(format_key: str) -> List[PhaseConfig]:
    """Every phase that can hold matches, i.e. all but ``start``."""
    return [p for p in get_phases(format_key) if p.is_schedulable]
