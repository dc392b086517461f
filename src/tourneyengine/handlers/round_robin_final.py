"""League season followed by a seeded playoff."""

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
    ADVANCE_TOP,
    FORMAT_ROUND_ROBIN_FINAL,
    GEN_KNOCKOUT,
    MANY_MATCHES_THRESHOLD,
    MANY_TEAMS_THRESHOLD,
    MSG_ALL_TEAMS_IN_PLAYOFFS,
    MSG_MANY_MATCHES,
    MSG_MANY_TEAMS,
    MSG_NO_TEAMS_ADVANCING,
    MSG_NOT_ENOUGH_TEAMS_FOR_PLAYOFFS,
    PHASE_FINAL,
    PHASE_REGULAR_SEASON,
    PHASE_THIRD_PLACE,
    PLAYOFF_FORMATS,
    PLAYOFF_SINGLE_MATCH,
    VALID_PLAYOFF_TEAMS,
)
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.handlers.context import PhaseContext, TransitionPlan
from tourneyengine.models.phase import AdvancementRule, PhaseConfig
from tourneyengine.models.settings import RoundRobinFinalSettings
from tourneyengine.pairing.round_robin import total_round_robin_matches
from tourneyengine.utils.validation import (
    ValidationIssue,
    ValidationResult,
    check_bool,
    check_choice,
)


def playoff_match_count(settings: RoundRobinFinalSettings) -> int:
    """Minimum number of playoff matches, counting two legs for a series."""
    per_tie = 1 if settings.playoff_format == PLAYOFF_SINGLE_MATCH else 2
    total = (settings.playoff_teams - 1) * per_tie
    if settings.third_place_match and settings.playoff_teams >= 4:
        total += per_tie
    return total


class RoundRobinFinalHandler(FormatHandler):
    format_key = FORMAT_ROUND_ROBIN_FINAL
    settings_class = RoundRobinFinalSettings

    def _validate(
        self, settings: RoundRobinFinalSettings, team_count: Optional[int], result: ValidationResult
    ) -> None:
        self._validate_standings(settings, result)
        check_bool(result, "doubleRoundRobin", settings.double_round_robin)
        playoff_ok = check_choice(
            result, "playoffTeams", settings.playoff_teams, VALID_PLAYOFF_TEAMS
        )
        format_ok = check_choice(
            result, "playoffFormat", settings.playoff_format, PLAYOFF_FORMATS
        )
        check_bool(result, "thirdPlaceMatch", settings.third_place_match)
        if not self._validate_team_count(team_count, result) or not playoff_ok:
            return

        if team_count < settings.playoff_teams:
            result.error(
                "playoffTeams",
                MSG_NOT_ENOUGH_TEAMS_FOR_PLAYOFFS,
                required=settings.playoff_teams,
                available=team_count,
            )
        elif team_count > 2 and team_count == settings.playoff_teams:
            result.warn("playoffTeams", MSG_ALL_TEAMS_IN_PLAYOFFS)

        if team_count > MANY_TEAMS_THRESHOLD:
            result.warn("teamCount", MSG_MANY_TEAMS, count=team_count)
        if format_ok:
            total = total_round_robin_matches(
                team_count, bool(settings.double_round_robin)
            ) + playoff_match_count(settings)
            if total > MANY_MATCHES_THRESHOLD:
                result.warn("matches", MSG_MANY_MATCHES, count=total)

    def playoff_format(self, settings: RoundRobinFinalSettings) -> str:
        return settings.playoff_format

    def third_place_enabled(self, settings: RoundRobinFinalSettings) -> bool:
        return bool(settings.third_place_match)

    def playoff_entry_phase(self, settings: RoundRobinFinalSettings) -> PhaseConfig:
        """Bracket phase sized for the playoff field: 8 quarter-finals, 4 semis, 2 the final."""
        for phase in self.phases:
            if phase.id == PHASE_THIRD_PLACE or phase.generation_type != GEN_KNOCKOUT:
                continue
            if phase.bracket_size == settings.playoff_teams:
                return phase
        return self.phase(PHASE_FINAL)

    def get_next_phase(self, context: PhaseContext) -> Optional[PhaseConfig]:
        if context.phase.id == PHASE_REGULAR_SEASON:
            return self.playoff_entry_phase(context.settings)
        return super().get_next_phase(context)

    def plan_transition(self, context: PhaseContext) -> TransitionPlan:
        if context.phase.id != PHASE_REGULAR_SEASON:
            return super().plan_transition(context)

        plan = TransitionPlan()
        target = self.playoff_entry_phase(context.settings)
        rule = AdvancementRule(context.settings.playoff_teams, ADVANCE_TOP, target.id)
        team_ids = self.get_advancing_teams(context.standings, [rule])
        if len(team_ids) < context.settings.playoff_teams:
            plan.errors.append(
                ValidationIssue(
                    "playoffTeams",
                    MSG_NO_TEAMS_ADVANCING,
                    {"phase": target.id, "required": context.settings.playoff_teams},
                )
            )
            return plan
        self._request(plan, target, team_ids, context.team_lookup)
        return plan
