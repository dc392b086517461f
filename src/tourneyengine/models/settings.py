"""Per-format tournament settings.

Stored settings use camelCase keys. Missing keys take the format default;
values are kept as given so validation can report them.
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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from tourneyengine.constants import (
    DEFAULT_POINTS_PER_DRAW,
    DEFAULT_POINTS_PER_LOSS,
    DEFAULT_POINTS_PER_WIN,
    DEFAULT_TIE_BREAKERS,
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_ONLY,
    FORMAT_ROUND_ROBIN_FINAL,
    FORMAT_SWISS_SYSTEM,
    PLAYOFF_SINGLE_MATCH,
    POULE_ROUND_ROBIN,
    SEEDING_SEEDED,
)
from tourneyengine.exceptions import InvalidSettingsException, UnknownFormatException
from tourneyengine.type_hints import SnakePattern


def _default_pattern() -> SnakePattern:
    return [[1, 4, 5, 8], [2, 3, 6, 7]]


@dataclass
class StandingsSettings:
    """Points model and tie-break order shared by formats with a league table."""

    points_per_win: int = DEFAULT_POINTS_PER_WIN
    points_per_draw: int = DEFAULT_POINTS_PER_DRAW
    points_per_loss: int = DEFAULT_POINTS_PER_LOSS
    tie_breakers: List[str] = field(default_factory=lambda: list(DEFAULT_TIE_BREAKERS))

    def _standings_dict(self) -> Dict[str, Any]:
        return {
            "pointsPerWin": self.points_per_win,
            "pointsPerDraw": self.points_per_draw,
            "pointsPerLoss": self.points_per_loss,
            "tieBreakers": list(self.tie_breakers),
        }

    @staticmethod
    def _standings_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        for key, attr in (
            ("pointsPerWin", "points_per_win"),
            ("pointsPerDraw", "points_per_draw"),
            ("pointsPerLoss", "points_per_loss"),
        ):
            if key in data:
                kwargs[attr] = data[key]
        if "tieBreakers" in data:
            kwargs["tie_breakers"] = list(data["tieBreakers"] or [])
        return kwargs

    def to_dict(self) -> Dict[str, Any]:
        return self._standings_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StandingsSettings":
        return cls(**cls._standings_kwargs(data))


@dataclass
class LeagueOnlySettings(StandingsSettings):
    double_round_robin: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = self._standings_dict()
        data["doubleRoundRobin"] = self.double_round_robin
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeagueOnlySettings":
        kwargs = cls._standings_kwargs(data)
        if "doubleRoundRobin" in data:
            kwargs["double_round_robin"] = data["doubleRoundRobin"]
        return cls(**kwargs)


@dataclass
class KnockoutSettings:
    """Bracket settings, also nested inside groups + knockout settings."""

    bracket_size: int = 8
    seeding_method: str = SEEDING_SEEDED
    third_place_match: bool = True
    double_elimination: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bracketSize": self.bracket_size,
            "seedingMethod": self.seeding_method,
            "thirdPlaceMatch": self.third_place_match,
            "doubleElimination": self.double_elimination,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnockoutSettings":
        kwargs: Dict[str, Any] = {}
        for key, attr in (
            ("bracketSize", "bracket_size"),
            ("seedingMethod", "seeding_method"),
            ("thirdPlaceMatch", "third_place_match"),
            ("doubleElimination", "double_elimination"),
        ):
            if key in data:
                kwargs[attr] = data[key]
        return cls(**kwargs)


@dataclass
class GroupsKnockoutSettings(StandingsSettings):
    group_count: int = 4
    teams_per_group: int = 4
    advancing_per_group: int = 2
    double_round_robin: bool = False
    knockout_settings: KnockoutSettings = field(default_factory=KnockoutSettings)

    def to_dict(self) -> Dict[str, Any]:
        data = self._standings_dict()
        data.update(
            {
                "groupCount": self.group_count,
                "teamsPerGroup": self.teams_per_group,
                "advancingPerGroup": self.advancing_per_group,
                "doubleRoundRobin": self.double_round_robin,
                "knockoutSettings": self.knockout_settings.to_dict(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupsKnockoutSettings":
        kwargs = cls._standings_kwargs(data)
        for key, attr in (
            ("groupCount", "group_count"),
            ("teamsPerGroup", "teams_per_group"),
            ("advancingPerGroup", "advancing_per_group"),
            ("doubleRoundRobin", "double_round_robin"),
        ):
            if key in data:
                kwargs[attr] = data[key]
        nested = data.get("knockoutSettings")
        if nested is not None:
            if not isinstance(nested, dict):
                raise InvalidSettingsException("knockoutSettings must be an object")
            kwargs["knockout_settings"] = KnockoutSettings.from_dict(nested)
        return cls(**kwargs)


@dataclass
class RoundRobinFinalSettings(StandingsSettings):
    double_round_robin: bool = True
    playoff_teams: int = 4
    playoff_format: str = PLAYOFF_SINGLE_MATCH
    third_place_match: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = self._standings_dict()
        data.update(
            {
                "doubleRoundRobin": self.double_round_robin,
                "playoffTeams": self.playoff_teams,
                "playoffFormat": self.playoff_format,
                "thirdPlaceMatch": self.third_place_match,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundRobinFinalSettings":
        kwargs = cls._standings_kwargs(data)
        for key, attr in (
            ("doubleRoundRobin", "double_round_robin"),
            ("playoffTeams", "playoff_teams"),
            ("playoffFormat", "playoff_format"),
            ("thirdPlaceMatch", "third_place_match"),
        ):
            if key in data:
                kwargs[attr] = data[key]
        return cls(**kwargs)


@dataclass
class SwissSystemSettings(StandingsSettings):
    phase1_rounds: int = 7
    snake_seeding_pattern: SnakePattern = field(default_factory=_default_pattern)
    poule_format: str = POULE_ROUND_ROBIN
    double_round_robin: bool = True
    final_stage_teams: int = 4

    def to_dict(self) -> Dict[str, Any]:
        data = self._standings_dict()
        data.update(
            {
                "phase1Rounds": self.phase1_rounds,
                "snakeSeedingPattern": [list(p) for p in self.snake_seeding_pattern],
                "pouleFormat": self.poule_format,
                "doubleRoundRobin": self.double_round_robin,
                "finalStageTeams": self.final_stage_teams,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwissSystemSettings":
        kwargs = cls._standings_kwargs(data)
        for key, attr in (
            ("phase1Rounds", "phase1_rounds"),
            ("snakeSeedingPattern", "snake_seeding_pattern"),
            ("pouleFormat", "poule_format"),
            ("doubleRoundRobin", "double_round_robin"),
            ("finalStageTeams", "final_stage_teams"),
        ):
            if key in data:
                kwargs[attr] = data[key]
        return cls(**kwargs)


TournamentModeSettings = Union[
    LeagueOnlySettings,
    KnockoutSettings,
    GroupsKnockoutSettings,
    RoundRobinFinalSettings,
    SwissSystemSettings,
]

SETTINGS_CLASSES: Dict[str, Type] = {
    FORMAT_LEAGUE_ONLY: LeagueOnlySettings,
    FORMAT_KNOCKOUT: KnockoutSettings,
    FORMAT_GROUPS_KNOCKOUT: GroupsKnockoutSettings,
    FORMAT_ROUND_ROBIN_FINAL: RoundRobinFinalSettings,
    FORMAT_SWISS_SYSTEM: SwissSystemSettings,
}


def default_settings(format_key: str) -> TournamentModeSettings:
    try:
        return SETTINGS_CLASSES[format_key]()
    except KeyError:
        raise UnknownFormatException(format_key) from None


def settings_from_dict(
    format_key: str, data: Optional[Dict[str, Any]]
) -> TournamentModeSettings:
    """Build the settings of a format from a stored payload.

    Args:
        format_key: Canonical format key
        data: Stored settings, None when the mode has none

    Returns:
        Settings instance; absent keys take the format defaults

    Raises:
        UnknownFormatException: If the format key is not known
        InvalidSettingsException: If the payload is not an object
    """
    if format_key not in SETTINGS_CLASSES:
        raise UnknownFormatException(format_key)
    if data is None:
        return default_settings(format_key)
    if not isinstance(data, dict):
        raise InvalidSettingsException(
            f"Settings for {format_key!r} must be an object, got {type(data).__name__}"
        )
    return SETTINGS_CLASSES[format_key].from_dict(data)
