"""Knockout: a single elimination bracket with an optional third-place playoff."""

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

from typing import List, Optional, Sequence

from tourneyengine.constants import (
    FORMAT_KNOCKOUT,
    MSG_DOUBLE_ELIMINATION,
    MSG_FEWER_TEAMS_THAN_BRACKET,
    MSG_INVALID_BRACKET_SIZE,
    MSG_KNOCKOUT_POWER_OF_TWO,
    MSG_TOO_MANY_TEAMS_FOR_BRACKET,
    PHASE_FINAL,
    SEEDING_METHODS,
    VALID_BRACKET_SIZES,
)
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.handlers.context import PhaseContext
from tourneyengine.models.phase import AdvancementRule, PhaseConfig
from tourneyengine.models.settings import KnockoutSettings
from tourneyengine.models.standings import StandingsRow
from tourneyengine.utils import is_power_of_two
from tourneyengine.utils.validation import ValidationResult, check_bool, check_choice


def validate_knockout_settings(settings: KnockoutSettings, result: ValidationResult) -> None:
    """Checks shared by the knockout format and the bracket of groups + knockout."""
    if settings.bracket_size not in VALID_BRACKET_SIZES:
        result.error(
            "bracketSize", MSG_INVALID_BRACKET_SIZE, options=list(VALID_BRACKET_SIZES)
        )
    check_choice(result, "seedingMethod", settings.seeding_method, SEEDING_METHODS)
    check_bool(result, "thirdPlaceMatch", settings.third_place_match)
    if check_bool(result, "doubleElimination", settings.double_elimination):
        if settings.double_elimination:
            result.warn("doubleElimination", MSG_DOUBLE_ELIMINATION)


class KnockoutHandler(FormatHandler):
    format_key = FORMAT_KNOCKOUT
    settings_class = KnockoutSettings

    def _validate(
        self, settings: KnockoutSettings, team_count: Optional[int], result: ValidationResult
    ) -> None:
        validate_knockout_settings(settings, result)
        if not self._validate_team_count(team_count, result):
            return

        if not is_power_of_two(team_count):
            result.warn("teamCount", MSG_KNOCKOUT_POWER_OF_TWO, count=team_count)
        if settings.bracket_size in VALID_BRACKET_SIZES:
            if team_count > settings.bracket_size:
                result.error(
                    "teamCount",
                    MSG_TOO_MANY_TEAMS_FOR_BRACKET,
                    count=team_count,
                    bracketSize=settings.bracket_size,
                )
            elif team_count < settings.bracket_size:
                result.warn(
                    "teamCount",
                    MSG_FEWER_TEAMS_THAN_BRACKET,
                    count=team_count,
                    bracketSize=settings.bracket_size,
                )

    def seeding_method(self, settings: KnockoutSettings) -> str:
        return settings.seeding_method

    def third_place_enabled(self, settings: KnockoutSettings) -> bool:
        return bool(settings.third_place_match)

    def get_entry_phase(self, team_count: int, settings: KnockoutSettings) -> PhaseConfig:
        """Bracket phase sized for the whole field."""
        start = self.phases[0]
        return self.bracket_phase_for(start, team_count) or self.phase(PHASE_FINAL)

    def get_advancing_teams(
        self, standings: Sequence[StandingsRow], rules: Sequence[AdvancementRule]
    ) -> List[str]:
        """Teams that won more than they lost, i.e. the match winners."""
        return [row.team_id for row in standings if row.wins > row.losses]

    def calculate_standings(self, context: PhaseContext, group: Optional[str] = None):
        return self.calculator.calculate_knockout(context.matches, stage_filter=context.phase.id)
