"""Common behaviour of the format handlers.

A handler binds the pairing primitives and the standings calculator to one
format definition. Subclasses supply settings validation and the format
specific parts of generation and phase closing.
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

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple, Type

from tourneyengine.constants import (
    ADVANCE_TOP,
    GEN_KNOCKOUT,
    GEN_ROUND_ROBIN,
    GEN_SWISS_PAIRING,
    MIN_TEAMS,
    MSG_FORCED_REPEAT,
    MSG_INVALID_OPTION,
    MSG_MIN_TEAMS,
    MSG_NO_MATCHES,
    MSG_NO_TEAMS_ADVANCING,
    MSG_PHASE_NOT_SCHEDULABLE,
    MSG_UNRESOLVED_TIE,
    MSG_UNSUPPORTED_GENERATION,
    MSG_WRONG_SETTINGS,
    PHASE_FINAL,
    PHASE_SEMI_FINAL,
    PHASE_THIRD_PLACE,
    PLAYOFF_SINGLE_MATCH,
    SEEDING_RANDOM,
    SEEDING_SEEDED,
    STATUS_CANCELLED,
)
from tourneyengine.exceptions import InvalidSeedingMethodException
from tourneyengine.formats.registry import find_phase, get_phase_by_id, get_phases
from tourneyengine.handlers.context import (
    GenerationContext,
    GenerationRequest,
    PhaseContext,
    TransitionPlan,
)
from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.phase import AdvancementRule, PhaseConfig
from tourneyengine.models.results import GenerationResult
from tourneyengine.models.settings import StandingsSettings
from tourneyengine.models.standings import StandingsRow
from tourneyengine.models.team import Team, seed_in_order, sort_by_seed
from tourneyengine.pairing.knockout import (
    TieOutcome,
    generate_knockout_pairings,
    playoff_legs,
    resolve_ties,
    shuffle_teams,
)
from tourneyengine.pairing.round_robin import generate_round_robin
from tourneyengine.pairing.swiss import generate_swiss_pairings
from tourneyengine.standings.calculator import StandingsCalculator
from tourneyengine.utils import next_power_of_two, setup_logger
from tourneyengine.utils.validation import (
    ValidationIssue,
    ValidationResult,
    check_points,
    check_tie_breakers,
)

logger = setup_logger(__name__)


class FormatHandler(ABC):
    """Base class of the per-format handlers.

    Subclasses set ``format_key`` and ``settings_class`` and implement
    ``_validate``. The remaining hooks have defaults that fit league-like
    formats.
    """

    format_key: str = ""
    settings_class: Type = StandingsSettings

    def __init__(self):
        self.calculator = StandingsCalculator()

    # ========== Registry Helpers ==========

    @property
    def phases(self) -> List[PhaseConfig]:
        return get_phases(self.format_key)

    def phase(self, phase_id: str) -> PhaseConfig:
        return get_phase_by_id(self.format_key, phase_id)

    def find_phase(self, phase_id: str) -> Optional[PhaseConfig]:
        return find_phase(self.format_key, phase_id)

    # ========== Settings Hooks ==========

    def standings_settings(self, settings) -> StandingsSettings:
        if isinstance(settings, StandingsSettings):
            return settings
        return StandingsSettings()

    def seeding_method(self, settings) -> str:
        return SEEDING_SEEDED

    def playoff_format(self, settings) -> str:
        return PLAYOFF_SINGLE_MATCH

    def third_place_enabled(self, settings) -> bool:
        return False

    def double_round_robin(self, settings) -> bool:
        return bool(getattr(settings, "double_round_robin", False))

    def include_return_games(self, phase: PhaseConfig, settings) -> bool:
        flag = phase.match_generation.include_return_games
        return flag if flag is not None else self.double_round_robin(settings)

    # ========== Validation ==========

    def validate_settings(self, settings, team_count: Optional[int] = None) -> ValidationResult:
        """Validate settings, optionally against a team count.

        Every problem is collected; nothing is raised.

        Args:
            settings: Settings instance of this format
            team_count: Number of teams in the season, when known

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult()
        if not isinstance(settings, self.settings_class):
            result.error("settings", MSG_WRONG_SETTINGS, format=self.format_key)
            return result
        self._validate(settings, team_count, result)
        return result

    @abstractmethod
    def _validate(self, settings, team_count: Optional[int], result: ValidationResult) -> None:
        """Format-specific checks."""

    @staticmethod
    def _validate_standings(settings: StandingsSettings, result: ValidationResult) -> None:
        check_points(result, settings)
        check_tie_breakers(result, settings.tie_breakers)

    @staticmethod
    def _validate_team_count(team_count: Optional[int], result: ValidationResult) -> bool:
        if team_count is not None and team_count < MIN_TEAMS:
            result.error("teamCount", MSG_MIN_TEAMS, min=MIN_TEAMS, count=team_count)
            return False
        return team_count is not None

    # ========== Generation ==========

    def generate_matches(self, context: GenerationContext) -> GenerationResult:
        """Generate the fixtures of a phase.

        Failures are returned, not raised: invalid settings, a phase that
        cannot hold matches, or fewer than two teams.
        """
        validation = self.validate_settings(context.settings)
        if not validation.valid:
            return GenerationResult(success=False, errors=list(validation.errors))
        phase = context.phase
        if not phase.is_schedulable:
            return GenerationResult.failure("phase", MSG_PHASE_NOT_SCHEDULABLE, phase=phase.id)
        if len(context.teams) < MIN_TEAMS:
            return GenerationResult.failure(
                "teams", MSG_MIN_TEAMS, min=MIN_TEAMS, count=len(context.teams)
            )

        generation = phase.generation_type
        if generation == GEN_ROUND_ROBIN:
            result = self._generate_round_robin(context)
        elif generation == GEN_KNOCKOUT:
            result = self._generate_knockout(context)
        elif generation == GEN_SWISS_PAIRING:
            result = self._generate_swiss(context)
        else:
            return GenerationResult.failure(
                "phase", MSG_UNSUPPORTED_GENERATION, phase=phase.id, type=generation
            )

        if result.success:
            logger.info(
                f"{self.format_key}: generated {len(result.matches)} matches for "
                f"{phase.id} (round {context.round})"
            )
        return result

    def _round_robin_matches(
        self,
        phase: PhaseConfig,
        team_ids: Sequence[str],
        include_return_games: bool,
        first_round: int = 1,
        group: Optional[str] = None,
    ) -> Tuple[List[GeneratedMatch], List[str]]:
        schedule = generate_round_robin(team_ids, include_return_games)
        offset = first_round - 1
        matches = [
            GeneratedMatch(
                home_team_id=p.home,
                away_team_id=p.away,
                stage=phase.id,
                round=p.round + offset,
                group=group,
            )
            for p in schedule.pairings
        ]
        byes = list(dict.fromkeys(schedule.byes[r] for r in sorted(schedule.byes)))
        return matches, byes

    def _generate_round_robin(self, context: GenerationContext) -> GenerationResult:
        matches, byes = self._round_robin_matches(
            context.phase,
            [team.id for team in context.teams],
            self.include_return_games(context.phase, context.settings),
            context.round,
        )
        return GenerationResult(success=True, matches=matches, byes=byes)

    def _generate_knockout(self, context: GenerationContext) -> GenerationResult:
        phase = context.phase
        method = self.seeding_method(context.settings)
        entrants = list(context.teams)
        if method == SEEDING_RANDOM and not context.preserve_order:
            # The drawn order becomes the seeding
            drawn = shuffle_teams(entrants, context.rng)
            entrants = [team.with_seed(index + 1) for index, team in enumerate(drawn)]
            method = SEEDING_SEEDED
        try:
            pairings = generate_knockout_pairings(
                entrants, method, context.rng, context.preserve_order
            )
        except InvalidSeedingMethodException:
            return GenerationResult.failure("seedingMethod", MSG_INVALID_OPTION, value=method)

        matches: List[GeneratedMatch] = []
        byes: List[str] = []
        playoff_format = self.playoff_format(context.settings)
        for pairing in pairings:
            if pairing.is_bye:
                byes.append(pairing.bye_team)
                continue
            for home, away, leg in playoff_legs(pairing.home, pairing.away, playoff_format):
                matches.append(
                    GeneratedMatch(
                        home_team_id=home,
                        away_team_id=away,
                        stage=phase.id,
                        round=context.round,
                        bracket_position=pairing.position,
                        leg=leg,
                    )
                )
        if not matches:
            return GenerationResult.failure(
                "teams", MSG_MIN_TEAMS, min=MIN_TEAMS, count=len(context.teams)
            )
        return GenerationResult(success=True, matches=matches, byes=byes, entrants=entrants)

    def _generate_swiss(self, context: GenerationContext) -> GenerationResult:
        pairing = generate_swiss_pairings(
            [team.id for team in sort_by_seed(context.teams)],
            ranking=[row.team_id for row in context.standings],
            played_pairs=context.played_pairs,
            previous_byes=context.previous_byes,
        )
        matches = [
            GeneratedMatch(home_team_id=home, away_team_id=away, stage=context.phase.id, round=context.round)
            for home, away in pairing.pairings
        ]
        result = GenerationResult(
            success=True,
            matches=matches,
            byes=[pairing.bye] if pairing.bye else [],
            forced_repeats=list(pairing.forced_repeats),
        )
        if pairing.forced_repeats:
            result.warnings.append(
                ValidationIssue(
                    "pairings",
                    MSG_FORCED_REPEAT,
                    {
                        "round": context.round,
                        "pairs": [list(pair) for pair in pairing.forced_repeats],
                    },
                )
            )
        return result

    # ========== Standings ==========

    def calculate_standings(
        self, context: PhaseContext, group: Optional[str] = None
    ) -> List[StandingsRow]:
        """Standings of a phase, or of one group of it."""
        if context.phase.generation_type == GEN_KNOCKOUT:
            return self.calculator.calculate_knockout(context.matches, stage_filter=context.phase.id)
        return self.calculator.calculate(
            context.matches,
            self.standings_settings(context.settings),
            stage_filter=context.phase.id,
            group_filter=group,
            tiebreak_context=context.tiebreak_context,
        )

    def get_advancing_teams(
        self, standings: Sequence[StandingsRow], rules: Sequence[AdvancementRule]
    ) -> List[str]:
        """Top or bottom teams per rule, merged without duplicates."""
        selected: List[str] = []
        for rule in rules:
            if rule.count <= 0:
                continue
            if rule.from_ == ADVANCE_TOP:
                rows = standings[: rule.count]
            else:
                rows = standings[-rule.count :]
            for row in rows:
                if row.team_id not in selected:
                    selected.append(row.team_id)
        return selected

    # ========== Phase Graph ==========

    def get_entry_phase(self, team_count: int, settings) -> PhaseConfig:
        """First playable phase of a new season."""
        return next(p for p in self.phases if p.is_schedulable)

    def get_next_phase(self, context: PhaseContext) -> Optional[PhaseConfig]:
        """Phase with the next higher order.

        The third-place playoff follows the semi-finals when enabled and is
        skipped otherwise. Terminal phases have no next phase.
        """
        current = context.phase
        if current.is_terminal:
            return None
        third_place = self.find_phase(PHASE_THIRD_PLACE)
        if (
            current.id == PHASE_SEMI_FINAL
            and third_place is not None
            and self.third_place_enabled(context.settings)
        ):
            return third_place
        for phase in self.phases:
            if phase.order > current.order and phase.id != PHASE_THIRD_PLACE:
                return phase
        return None

    def bracket_phase_for(self, after: PhaseConfig, team_count: int) -> Optional[PhaseConfig]:
        """First bracket phase after ``after`` sized for ``team_count`` teams."""
        for phase in self.phases:
            if phase.order <= after.order or phase.id == PHASE_THIRD_PLACE:
                continue
            if phase.generation_type != GEN_KNOCKOUT:
                continue
            size = phase.bracket_size
            if size is None or team_count > size // 2:
                return phase
        return None

    def needs_entrants(self, phase: PhaseConfig) -> bool:
        """True when closing the phase needs the list of teams that entered it."""
        return phase.generation_type == GEN_KNOCKOUT

    # ========== Transitions ==========

    def plan_transition(self, context: PhaseContext) -> TransitionPlan:
        """Decide what follows the close of a phase."""
        if context.phase.generation_type == GEN_KNOCKOUT:
            return self._plan_knockout(context)
        return self._plan_league(context)

    def _request(
        self,
        plan: TransitionPlan,
        phase: PhaseConfig,
        team_ids: Sequence[str],
        lookup: Dict[str, Team],
        round_number: int = 1,
        preserve_order: bool = False,
    ) -> GenerationRequest:
        if preserve_order:
            teams = [lookup.get(team_id, Team(id=team_id)) for team_id in team_ids]
        else:
            teams = seed_in_order(list(team_ids), lookup)
        request = GenerationRequest(
            phase=phase, teams=teams, round=round_number, preserve_order=preserve_order
        )
        plan.requests.append(request)
        plan.advancing.setdefault(phase.id, []).extend(team_ids)
        return request

    def _plan_league(self, context: PhaseContext) -> TransitionPlan:
        plan = TransitionPlan()
        phase = context.phase
        if phase.is_terminal or not phase.advancement_rules:
            return plan

        targets: Dict[str, List[str]] = {}
        for rule in phase.advancement_rules:
            for team_id in self.get_advancing_teams(context.standings, [rule]):
                bucket = targets.setdefault(rule.to_phase, [])
                if team_id not in bucket:
                    bucket.append(team_id)

        lookup = context.team_lookup
        for target_id, team_ids in targets.items():
            if len(team_ids) < MIN_TEAMS:
                plan.errors.append(
                    ValidationIssue("advancementRules", MSG_NO_TEAMS_ADVANCING, {"phase": target_id})
                )
                continue
            self._request(plan, self.phase(target_id), team_ids, lookup)
        return plan

    def _round_byes(
        self, context: PhaseContext, round_matches: Sequence[Match], ties: Sequence[TieOutcome]
    ) -> List[Tuple[int, str]]:
        """(bracket position, team) of the byes in the first round of a bracket phase.

        Entrants recorded at generation carry their bracket seeds, random draws
        included, so replaying the seeding finds the bye slots again. When the
        replay does not fit the played ties the byes fill the free positions
        in entrant order.
        """
        if context.entrants is None:
            return []
        participants = {t for m in round_matches for t in (m.home_team_id, m.away_team_id)}
        bye_teams = [team for team in context.entrants if team.id not in participants]
        if not bye_teams:
            return []

        method = self.seeding_method(context.settings)
        if method == SEEDING_RANDOM:
            method = SEEDING_SEEDED
        taken = {t.position for t in ties}
        replay = generate_knockout_pairings(context.entrants, method)
        positions = {p.bye_team: p.position for p in replay if p.is_bye}
        if all(
            team.id in positions and positions[team.id] not in taken for team in bye_teams
        ):
            return [(positions[team.id], team.id) for team in bye_teams]

        free = [
            p for p in range(next_power_of_two(len(context.entrants)) // 2) if p not in taken
        ]
        return list(zip(free, [team.id for team in bye_teams]))

    def _plan_knockout(self, context: PhaseContext) -> TransitionPlan:
        """Close the current round of a bracket phase.

        Level best-of-3 series get a decider first. Otherwise the winners go
        on, inside the same phase while the field is too large for the next
        phase, and into the next bracket phase when it fits. After the
        semi-finals the third-place playoff and the final are generated
        together.
        """
        plan = TransitionPlan()
        phase = context.phase
        if not context.matches:
            plan.errors.append(ValidationIssue("matches", MSG_NO_MATCHES, {"phase": phase.id}))
            return plan

        current_round = max(m.round or 1 for m in context.matches)
        round_matches = [m for m in context.matches if (m.round or 1) == current_round]
        ties = resolve_ties(
            [m for m in round_matches if m.status != STATUS_CANCELLED],
            self.playoff_format(context.settings),
        )

        deciders = [t for t in ties if t.needs_decider]
        if deciders:
            plan.phase_closed = False
            for tie in deciders:
                plan.extra_matches.append(
                    GeneratedMatch(
                        home_team_id=tie.team_a,
                        away_team_id=tie.team_b,
                        stage=phase.id,
                        round=current_round,
                        bracket_position=tie.position,
                        leg=3,
                    )
                )
            return plan

        unresolved = [t for t in ties if not t.resolved]
        if unresolved:
            plan.errors.append(
                ValidationIssue(
                    "matches",
                    MSG_UNRESOLVED_TIE,
                    {"ties": [[t.team_a, t.team_b] for t in unresolved]},
                )
            )
            return plan

        byes = self._round_byes(context, round_matches, ties) if current_round == 1 else []
        if all(t.position is not None for t in ties):
            winners = [team for _, team in sorted([(t.position, t.winner) for t in ties] + byes)]
        else:
            winners = [t.winner for t in ties] + [team for _, team in byes]
        losers = [t.loser for t in ties]

        if len(winners) < 2:
            # Bracket decided
            return plan

        lookup = context.team_lookup
        next_phase = self.get_next_phase(context)
        if next_phase is not None and next_phase.id == PHASE_THIRD_PLACE:
            if len(losers) >= 2:
                self._request(plan, next_phase, losers, lookup, preserve_order=True)
            else:
                plan.warnings.append(
                    ValidationIssue("thirdPlaceMatch", MSG_NO_TEAMS_ADVANCING, {"phase": next_phase.id})
                )
            self._request(plan, self.phase(PHASE_FINAL), winners, lookup, preserve_order=True)
            return plan

        if next_phase is None or (
            next_phase.bracket_size is not None and len(winners) > next_phase.bracket_size
        ):
            plan.phase_closed = False
            self._request(
                plan,
                phase,
                winners,
                lookup,
                round_number=current_round + 1,
                preserve_order=True,
            )
            return plan

        target = self.bracket_phase_for(phase, len(winners)) or next_phase
        self._request(plan, target, winners, lookup, preserve_order=True)
        return plan
