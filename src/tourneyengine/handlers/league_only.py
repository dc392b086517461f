"""League only: one round robin, optionally home and away."""

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

from typing import Optional

from tourneyengine.constants import (
    FORMAT_LEAGUE_ONLY,
    MANY_MATCHES_THRESHOLD,
    MANY_TEAMS_THRESHOLD,
    MSG_MANY_MATCHES,
    MSG_MANY_TEAMS,
)
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.models.settings import LeagueOnlySettings
from tourneyengine.pairing.round_robin import total_round_robin_matches
from tourneyengine.utils.validation import ValidationResult, check_bool


class LeagueOnlyHandler(FormatHandler):
    format_key = FORMAT_LEAGUE_ONLY
    settings_class = LeagueOnlySettings

    def _validate(
        self, settings: LeagueOnlySettings, team_count: Optional[int], result: ValidationResult
    ) -> None:
        self._validate_standings(settings, result)
        check_bool(result, "doubleRoundRobin", settings.double_round_robin)
        if not self._validate_team_count(team_count, result):
            return

        if team_count > MANY_TEAMS_THRESHOLD:
            result.warn("teamCount", MSG_MANY_TEAMS, count=team_count)
        total = total_round_robin_matches(team_count, bool(settings.double_round_robin))
        if total > MANY_MATCHES_THRESHOLD:
            result.warn("matches", MSG_MANY_MATCHES, count=total)
