"""Groups + knockout: serpentine groups playing round robins, then a bracket."""

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

from typing import List, Optional

from tourneyengine.constants import (
    ADVANCE_TOP,
    FORMAT_GROUPS_KNOCKOUT,
    MAX_ADVANCING_PER_GROUP,
    MAX_GROUP_COUNT,
    MAX_TEAMS_PER_GROUP,
    MIN_ADVANCING_PER_GROUP,
    MIN_GROUP_COUNT,
    MIN_TEAMS,
    MIN_TEAMS_PER_GROUP,
    MSG_ADVANCING_NOT_POWER_OF_TWO,
    MSG_EXTRA_TEAMS,
    MSG_NO_TEAMS_ADVANCING,
    MSG_NOT_ENOUGH_TEAMS_FOR_GROUPS,
    MSG_TOO_MANY_ADVANCING,
    PHASE_FINAL,
    PHASE_GROUP_STAGE,
    PHASE_KNOCKOUT,
)
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.handlers.context import GenerationContext, PhaseContext, TransitionPlan
from tourneyengine.handlers.knockout import validate_knockout_settings
from tourneyengine.models.phase import AdvancementRule
from tourneyengine.models.results import GenerationResult
from tourneyengine.models.settings import GroupsKnockoutSettings
from tourneyengine.pairing.seeding import distribute_serpentine
from tourneyengine.utils import is_power_of_two
from tourneyengine.utils.validation import (
    ValidationIssue,
    ValidationResult,
    check_bool,
    check_int_range,
)


class GroupsKnockoutHandler(FormatHandler):
    """Group stage followed by a seeded bracket.

    Advancing teams are seeded group by group: winner of group A gets seed
    1, runner-up of group A seed 2, winner of group B seed 3 and so on.
    """

    format_key = FORMAT_GROUPS_KNOCKOUT
    settings_class = GroupsKnockoutSettings

    def _validate(
        self, settings: GroupsKnockoutSettings, team_count: Optional[int], result: ValidationResult
    ) -> None:
        self._validate_standings(settings, result)
        groups_ok = check_int_range(
            result, "groupCount", settings.group_count, MIN_GROUP_COUNT, MAX_GROUP_COUNT
        )
        size_ok = check_int_range(
            result, "teamsPerGroup", settings.teams_per_group, MIN_TEAMS_PER_GROUP, MAX_TEAMS_PER_GROUP
        )
        advancing_ok = check_int_range(
            result,
            "advancingPerGroup",
            settings.advancing_per_group,
            MIN_ADVANCING_PER_GROUP,
            MAX_ADVANCING_PER_GROUP,
        )
        check_bool(result, "doubleRoundRobin", settings.double_round_robin)

        if size_ok and advancing_ok and settings.advancing_per_group > settings.teams_per_group:
            result.error(
                "advancingPerGroup", MSG_TOO_MANY_ADVANCING, max=settings.teams_per_group
            )
            advancing_ok = False

        bracket = ValidationResult()
        validate_knockout_settings(settings.knockout_settings, bracket)
        result.merge(bracket, prefix="knockoutSettings")

        if groups_ok and advancing_ok:
            advancing = settings.group_count * settings.advancing_per_group
            if not is_power_of_two(advancing):
                result.warn("advancingPerGroup", MSG_ADVANCING_NOT_POWER_OF_TWO, count=advancing)

        if not self._validate_team_count(team_count, result):
            return
        if groups_ok and size_ok:
            required = settings.group_count * settings.teams_per_group
            if team_count < required:
                result.error(
                    "teamCount", MSG_NOT_ENOUGH_TEAMS_FOR_GROUPS, required=required, count=team_count
                )
            elif team_count > required:
                result.warn("teamCount", MSG_EXTRA_TEAMS, required=required, count=team_count)

    def seeding_method(self, settings: GroupsKnockoutSettings) -> str:
        return settings.knockout_settings.seeding_method

    def _generate_round_robin(self, context: GenerationContext) -> GenerationResult:
        """One round robin per group; every match carries its group."""
        phase = context.phase
        groups = context.group_assignments or distribute_serpentine(
            context.teams, context.settings.group_count
        )
        include = self.include_return_games(phase, context.settings)

        result = GenerationResult(success=True, groups=groups)
        for name, team_ids in groups.items():
            if len(team_ids) < MIN_TEAMS:
                return GenerationResult.failure(
                    "teams",
                    MSG_NOT_ENOUGH_TEAMS_FOR_GROUPS,
                    group=name,
                    count=len(team_ids),
                )
            matches, byes = self._round_robin_matches(
                phase, team_ids, include, context.round, group=name
            )
            result.matches.extend(matches)
            result.byes.extend(byes)
        return result

    def plan_transition(self, context: PhaseContext) -> TransitionPlan:
        if context.phase.id != PHASE_GROUP_STAGE:
            return super().plan_transition(context)

        plan = TransitionPlan()
        advancing_per_group = context.settings.advancing_per_group
        target_id = PHASE_KNOCKOUT
        if context.phase.advancement_rules:
            target_id = context.phase.advancement_rules[0].to_phase

        team_ids: List[str] = []
        for name in sorted(context.group_standings):
            rule = AdvancementRule(advancing_per_group, ADVANCE_TOP, target_id, from_group=name)
            team_ids.extend(self.get_advancing_teams(context.group_standings[name], [rule]))

        if len(team_ids) < MIN_TEAMS:
            plan.errors.append(
                ValidationIssue("advancementRules", MSG_NO_TEAMS_ADVANCING, {"phase": target_id})
            )
            return plan

        # Two teams left means straight to the final
        target = self.phase(PHASE_FINAL if len(team_ids) == 2 else target_id)
        self._request(plan, target, team_ids, context.team_lookup)
        return plan
