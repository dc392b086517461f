"""Data records of the tournament engine."""

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

from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.override import ManualOverride, MatchResolution
from tourneyengine.models.phase import AdvancementRule, MatchGenerationConfig, PhaseConfig
from tourneyengine.models.results import GenerationResult, TransitionResult
from tourneyengine.models.settings import (
    GroupsKnockoutSettings,
    KnockoutSettings,
    LeagueOnlySettings,
    RoundRobinFinalSettings,
    StandingsSettings,
    SwissSystemSettings,
    TournamentModeSettings,
    default_settings,
    settings_from_dict,
)
from tourneyengine.models.standings import StandingsRow, StandingsSnapshot
from tourneyengine.models.team import Team

__all__ = [
    "AdvancementRule",
    "GeneratedMatch",
    "GenerationResult",
    "GroupsKnockoutSettings",
    "KnockoutSettings",
    "LeagueOnlySettings",
    "ManualOverride",
    "Match",
    "MatchGenerationConfig",
    "MatchResolution",
    "PhaseConfig",
    "RoundRobinFinalSettings",
    "StandingsRow",
    "StandingsSettings",
    "StandingsSnapshot",
    "SwissSystemSettings",
    "Team",
    "TournamentModeSettings",
    "TransitionResult",
    "default_settings",
    "settings_from_dict",
]
