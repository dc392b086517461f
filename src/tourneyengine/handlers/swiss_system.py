"""Swiss system: Swiss rounds, snake-seeded poules, then a final stage."""

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

from typing import Dict, List, Optional, Set

from tourneyengine.constants import (
    ADVANCE_TOP,
    FORMAT_SWISS_SYSTEM,
    GEN_SWISS_PAIRING,
    MAX_FINAL_STAGE_TEAMS,
    MAX_PHASE1_ROUNDS,
    MIN_FINAL_STAGE_TEAMS,
    MIN_PHASE1_ROUNDS,
    MIN_TEAMS,
    MSG_EXTRA_POULES,
    MSG_FINAL_STAGE_TOO_LARGE,
    MSG_NO_TEAMS_ADVANCING,
    MSG_NOT_ENOUGH_TEAMS_FOR_SWISS,
    MSG_TOO_MANY_SWISS_ROUNDS,
    PHASE_FINAL,
    PHASE_POULE_A,
    PHASE_POULE_B,
    PHASE_REGULAR_SEASON,
    POULE_FORMATS,
    POULE_SWISS,
)
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.handlers.context import GenerationContext, PhaseContext, TransitionPlan
from tourneyengine.models.match import Match
from tourneyengine.models.phase import AdvancementRule, PhaseConfig
from tourneyengine.models.results import GenerationResult
from tourneyengine.models.settings import SwissSystemSettings
from tourneyengine.pairing.seeding import apply_snake_seeding
from tourneyengine.pairing.swiss import played_pairs_from_matches, rank_teams
from tourneyengine.utils import setup_logger
from tourneyengine.utils.validation import (
    ValidationIssue,
    ValidationResult,
    check_bool,
    check_choice,
    check_int_range,
    check_snake_pattern,
)

logger = setup_logger(__name__)

POULE_PHASES = (PHASE_POULE_A, PHASE_POULE_B)


class SwissSystemHandler(FormatHandler):
    """Swiss rounds for the whole field, then poules by snake seeding.

    The first ``phase1_rounds`` rounds are paired one at a time from the
    current ranking. The final ranking is then dealt into poules by the
    snake pattern; the top ``final_stage_teams`` of poule A play the final
    stage, poule B ends the season.
    """

    format_key = FORMAT_SWISS_SYSTEM
    settings_class = SwissSystemSettings

    def _validate(
        self, settings: SwissSystemSettings, team_count: Optional[int], result: ValidationResult
    ) -> None:
        self._validate_standings(settings, result)
        rounds_ok = check_int_range(
            result, "phase1Rounds", settings.phase1_rounds, MIN_PHASE1_ROUNDS, MAX_PHASE1_ROUNDS
        )
        pattern_ok = check_snake_pattern(result, settings.snake_seeding_pattern)
        check_choice(result, "pouleFormat", settings.poule_format, POULE_FORMATS)
        check_bool(result, "doubleRoundRobin", settings.double_round_robin)
        final_ok = check_int_range(
            result,
            "finalStageTeams",
            settings.final_stage_teams,
            MIN_FINAL_STAGE_TEAMS,
            MAX_FINAL_STAGE_TEAMS,
        )

        pattern = settings.snake_seeding_pattern
        if pattern_ok:
            if len(pattern) > len(POULE_PHASES):
                result.warn(
                    "snakeSeedingPattern", MSG_EXTRA_POULES, poules=len(POULE_PHASES)
                )
            if final_ok and settings.final_stage_teams > len(pattern[0]):
                result.error(
                    "finalStageTeams", MSG_FINAL_STAGE_TOO_LARGE, max=len(pattern[0])
                )

        if not self._validate_team_count(team_count, result):
            return
        if pattern_ok:
            required = max(rank for poule in pattern for rank in poule)
            if team_count < required:
                result.error(
                    "teamCount", MSG_NOT_ENOUGH_TEAMS_FOR_SWISS, required=required, count=team_count
                )
        if rounds_ok and settings.phase1_rounds > team_count - 1:
            result.warn(
                "phase1Rounds", MSG_TOO_MANY_SWISS_ROUNDS, rounds=settings.phase1_rounds, max=team_count - 1
            )

    def _is_swiss_poule(self, phase: PhaseConfig, settings: SwissSystemSettings) -> bool:
        return phase.id in POULE_PHASES and settings.poule_format == POULE_SWISS

    def _generate_round_robin(self, context: GenerationContext) -> GenerationResult:
        if self._is_swiss_poule(context.phase, context.settings):
            return self._generate_swiss(context)
        return super()._generate_round_robin(context)

    def needs_entrants(self, phase: PhaseConfig) -> bool:
        return super().needs_entrants(phase) or phase.generation_type == GEN_SWISS_PAIRING or (
            phase.id in POULE_PHASES
        )

    # ========== Transitions ==========

    def plan_transition(self, context: PhaseContext) -> TransitionPlan:
        phase = context.phase
        settings = context.settings
        if phase.id == PHASE_REGULAR_SEASON:
            if _current_round(context.matches) < settings.phase1_rounds:
                return self._next_swiss_round(context)
            return self._plan_poules(context)
        if phase.id in POULE_PHASES:
            if self._is_swiss_poule(phase, settings):
                field_size = len(_entrant_ids(context))
                if _current_round(context.matches) < field_size - 1:
                    return self._next_swiss_round(context)
            if phase.id == PHASE_POULE_A:
                return self._plan_final_stage(context)
            return TransitionPlan()
        return super().plan_transition(context)

    def _next_swiss_round(self, context: PhaseContext) -> TransitionPlan:
        plan = TransitionPlan(phase_closed=False)
        team_ids = rank_teams(_entrant_ids(context), [row.team_id for row in context.standings])
        request = self._request(
            plan,
            context.phase,
            team_ids,
            context.team_lookup,
            round_number=_current_round(context.matches) + 1,
            preserve_order=True,
        )
        request.standings = list(context.standings)
        request.played_pairs = played_pairs_from_matches(context.matches)
        request.previous_byes = _previous_byes(team_ids, context.matches)
        return plan

    def _plan_poules(self, context: PhaseContext) -> TransitionPlan:
        """Deal the final Swiss ranking into poules following the snake pattern."""
        plan = TransitionPlan()
        names = list(dict.fromkeys(rule.to_phase for rule in context.phase.advancement_rules))
        pattern = context.settings.snake_seeding_pattern
        if len(pattern) > len(names):
            logger.warning(
                f"Snake pattern has {len(pattern)} poules, only {len(names)} are played"
            )
            plan.warnings.append(
                ValidationIssue("snakeSeedingPattern", MSG_EXTRA_POULES, {"poules": len(names)})
            )

        ranked = rank_teams(_entrant_ids(context), [row.team_id for row in context.standings])
        poules = apply_snake_seeding(ranked, pattern[: len(names)], names)
        for name, team_ids in poules.items():
            if len(team_ids) < MIN_TEAMS:
                plan.errors.append(
                    ValidationIssue("snakeSeedingPattern", MSG_NO_TEAMS_ADVANCING, {"phase": name})
                )
                continue
            self._request(plan, self.phase(name), team_ids, context.team_lookup)
        if plan.errors:
            plan.requests.clear()
            plan.advancing.clear()
        return plan

    def _plan_final_stage(self, context: PhaseContext) -> TransitionPlan:
        plan = TransitionPlan()
        rule = AdvancementRule(context.settings.final_stage_teams, ADVANCE_TOP, PHASE_FINAL)
        team_ids = self.get_advancing_teams(context.standings, [rule])
        if len(team_ids) < MIN_TEAMS:
            plan.errors.append(
                ValidationIssue("finalStageTeams", MSG_NO_TEAMS_ADVANCING, {"phase": PHASE_FINAL})
            )
            return plan
        self._request(plan, self.phase(PHASE_FINAL), team_ids, context.team_lookup)
        return plan


def _current_round(matches: List[Match]) -> int:
    return max((m.round or 1 for m in matches), default=0)


def _entrant_ids(context: PhaseContext) -> List[str]:
    if context.entrants is not None:
        return [team.id for team in context.entrants]
    seen: Dict[str, None] = {}
    for match in context.matches:
        seen.setdefault(match.home_team_id)
        seen.setdefault(match.away_team_id)
    return list(seen)


def _previous_byes(team_ids: List[str], matches: List[Match]) -> Set[str]:
    """Teams missing from at least one played round."""
    byes: Set[str] = set()
    for round_number in {m.round or 1 for m in matches}:
        playing = {
            team
            for m in matches
            if (m.round or 1) == round_number
            for team in (m.home_team_id, m.away_team_id)
        }
        byes.update(team for team in team_ids if team not in playing)
    return byes
