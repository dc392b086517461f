"""Phase transitions of a season.

The orchestrator loads a phase from the match store, settles open matches
with manual resolutions, ranks the phase, asks the format handler what comes
next, generates it and commits everything in one batch.
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

import random
from typing import Dict, List, Optional, Sequence, Tuple

from tourneyengine.constants import (
    GEN_KNOCKOUT,
    LEGACY_FORMAT_KEYS,
    MSG_NO_MATCHES,
    MSG_OPEN_MATCHES,
    MSG_PHASE_ALREADY_CLOSED,
    MSG_SNAPSHOT_FAILED,
    PHASE_FINAL,
    STATUS_CANCELLED,
)
from tourneyengine.controllers.phase_status import (
    PhaseProgress,
    determine_current_phase,
    summarize_phases,
)
from tourneyengine.controllers.stores import MatchStore, SettingsStore, SnapshotSink
from tourneyengine.exceptions import MatchPersistenceException
from tourneyengine.handlers import (
    FormatHandler,
    GenerationContext,
    PhaseContext,
    TransitionPlan,
    get_handler,
)
from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.override import (
    RESOLUTION_CANCEL,
    RESOLUTION_FREEZE,
    ManualOverride,
)
from tourneyengine.models.phase import PhaseConfig
from tourneyengine.models.results import GenerationResult, TransitionResult
from tourneyengine.models.settings import TournamentModeSettings, settings_from_dict
from tourneyengine.models.standings import StandingsSnapshot
from tourneyengine.models.team import Team
from tourneyengine.pairing.knockout import resolve_ties
from tourneyengine.standings.calculator import StandingsCalculator, TiebreakContext
from tourneyengine.utils import setup_logger
from tourneyengine.utils.validation import ValidationIssue, ValidationResult

logger = setup_logger(__name__)


class PhaseOrchestrator:
    """Drives one season of one format through its phases.

    Transitions of the same season must not run concurrently; the caller
    serializes them.

    Attributes:
        format_key: Canonical key of the format
        handler: Handler of the format
        match_store: Source of teams and matches, target of commits
        snapshot_sink: Receives standings snapshots at phase closure
        settings_store: Source of the stored settings payload
        tournament_mode_id: Key of the settings payload in the settings store
        rng: Random source for random bracket draws
    """

    def __init__(
        self,
        format_key: str,
        match_store: MatchStore,
        snapshot_sink: Optional[SnapshotSink] = None,
        settings_store: Optional[SettingsStore] = None,
        tournament_mode_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[TournamentModeSettings] = None,
    ):
        self.format_key = LEGACY_FORMAT_KEYS.get(format_key, format_key)
        self.handler: FormatHandler = get_handler(self.format_key)
        self.match_store = match_store
        self.snapshot_sink = snapshot_sink
        self.settings_store = settings_store
        self.tournament_mode_id = tournament_mode_id
        self.rng = rng
        self._settings = settings

    # ========== Settings ==========

    def load_settings(self) -> TournamentModeSettings:
        """Settings of the tournament mode, format defaults when none are stored.

        Raises:
            InvalidSettingsException: If the stored payload is not an object
        """
        if self._settings is None:
            data = None
            if self.settings_store is not None and self.tournament_mode_id is not None:
                data = self.settings_store.get_settings(self.tournament_mode_id)
            self._settings = settings_from_dict(self.format_key, data)
        return self._settings

    def validate(self, season_id: str) -> ValidationResult:
        """Validate the settings against the season's team count."""
        teams = self.match_store.get_teams(season_id)
        return self.handler.validate_settings(self.load_settings(), len(teams))

    # ========== Season Start ==========

    def start(self, season_id: str) -> GenerationResult:
        """Generate and store the first phase of a season.

        Returns:
            GenerationResult; on failure nothing is stored

        Raises:
            MatchPersistenceException: If the store rejects the new matches
        """
        settings = self.load_settings()
        teams = self.match_store.get_teams(season_id)
        validation = self.handler.validate_settings(settings, len(teams))
        if not validation.valid:
            return GenerationResult(
                success=False, errors=list(validation.errors), warnings=list(validation.warnings)
            )

        phase = self.handler.get_entry_phase(len(teams), settings)
        if self.match_store.get_matches(season_id, stage=phase.id):
            return GenerationResult.failure("phase", MSG_PHASE_ALREADY_CLOSED, phase=phase.id)

        result = self.handler.generate_matches(
            GenerationContext(phase=phase, teams=list(teams), settings=settings, rng=self.rng)
        )
        result.warnings = list(validation.warnings) + result.warnings
        if not result.success:
            return result

        self._commit(season_id, result.matches, [], {phase.id: result.entrants or list(teams)})
        logger.info(
            f"Season {season_id} started with {phase.id}: {len(result.matches)} matches"
        )
        return result

    # ========== Transitions ==========

    def preview_transition(
        self, season_id: str, phase_id: str, overrides: Optional[ManualOverride] = None
    ) -> TransitionResult:
        """Everything close_phase does, without writing anything."""
        return self._transition(season_id, phase_id, overrides, commit=False)

    def close_phase(
        self, season_id: str, phase_id: str, overrides: Optional[ManualOverride] = None
    ) -> TransitionResult:
        """Close a phase (or the current round of it) and generate what follows.

        Args:
            season_id: Season to work on
            phase_id: Phase to close, legacy phase names accepted
            overrides: Resolutions for open matches and a manual tie order

        Returns:
            TransitionResult; when ``success`` is False nothing was stored

        Raises:
            PhaseNotFoundException: If the format has no such phase
            MatchPersistenceException: If the store rejects the commit
        """
        return self._transition(season_id, phase_id, overrides, commit=True)

    def _transition(
        self,
        season_id: str,
        phase_id: str,
        overrides: Optional[ManualOverride],
        commit: bool,
    ) -> TransitionResult:
        handler = self.handler
        settings = self.load_settings()
        phase = handler.phase(phase_id)
        overrides = overrides or ManualOverride()

        teams = self.match_store.get_teams(season_id)
        all_matches = self.match_store.get_matches(season_id)
        phase_matches = [m for m in all_matches if m.stage == phase.id]
        if not phase_matches:
            return TransitionResult(
                success=False,
                errors=[ValidationIssue("phase", MSG_NO_MATCHES, {"phase": phase.id})],
            )

        effective, resolved, frozen, blocking = self._apply_overrides(phase_matches, overrides)
        if blocking:
            return TransitionResult(
                success=False,
                blocking_matches=blocking,
                errors=[
                    ValidationIssue(
                        "matches", MSG_OPEN_MATCHES, {"phase": phase.id, "count": len(blocking)}
                    )
                ],
            )

        context = self._phase_context(
            season_id, phase, settings, effective, teams, all_matches, overrides.tie_order
        )
        plan = handler.plan_transition(context)
        result = TransitionResult(
            success=False,
            phase_closed=plan.phase_closed,
            resolved_matches=resolved,
            standings=context.standings,
            group_standings=context.group_standings,
            advancing=dict(plan.advancing),
            warnings=list(plan.warnings),
        )
        if plan.errors:
            result.errors = list(plan.errors)
            return result

        duplicates = self._already_generated(plan, all_matches)
        if duplicates:
            result.errors = duplicates
            return result

        entrants: Dict[str, List[Team]] = {}
        for request in plan.requests:
            generated = handler.generate_matches(request.to_context(settings, self.rng))
            result.warnings.extend(generated.warnings)
            if not generated.success:
                result.errors = list(generated.errors)
                result.matches = []
                return result
            result.matches.extend(generated.matches)
            if request.round == 1:
                entrants.setdefault(request.phase.id, []).extend(
                    generated.entrants or request.teams
                )
            if request.phase not in result.next_phases:
                result.next_phases.append(request.phase)
        result.matches.extend(plan.extra_matches)

        if plan.phase_closed:
            result.snapshot = StandingsSnapshot.from_rows(
                season_id, phase.id, context.standings, context.group_standings
            )
            if commit:
                self._write_snapshot(result)

        if commit:
            self._commit(season_id, result.matches, resolved, entrants)
            logger.info(
                f"Season {season_id}: {'closed' if plan.phase_closed else 'advanced'} "
                f"{phase.id}, {len(result.matches)} new matches "
                f"for {[p.id for p in result.next_phases]}"
            )

        result.success = True
        result.tournament_complete = self._is_complete(
            all_matches, resolved, frozen, result.matches
        )
        return result

    # ========== Status ==========

    def phase_status(self, season_id: str) -> Dict[str, PhaseProgress]:
        return summarize_phases(self.handler.phases, self.match_store.get_matches(season_id))

    def current_phase(self, season_id: str) -> Optional[PhaseConfig]:
        return determine_current_phase(
            self.handler.phases, self.match_store.get_matches(season_id)
        )

    # ========== Internals ==========

    @staticmethod
    def _apply_overrides(
        matches: Sequence[Match], overrides: ManualOverride
    ) -> Tuple[List[Match], List[Match], List[Match], List[Match]]:
        """Split the matches of a phase by how they take part in the close.

        Returns:
            (matches used for ranking, matches changed by a resolution,
            matches frozen open, open matches without a resolution)
        """
        effective: List[Match] = []
        resolved: List[Match] = []
        frozen: List[Match] = []
        blocking: List[Match] = []
        for match in matches:
            resolution = overrides.resolution_for(match.id)
            if not match.is_open or resolution is None:
                if match.is_open:
                    blocking.append(match)
                elif match.status != STATUS_CANCELLED:
                    effective.append(match)
                continue

            logger.warning(f"Match {match.id} resolved manually: {resolution.resolution}")
            if resolution.resolution == RESOLUTION_CANCEL:
                resolved.append(match.with_status(STATUS_CANCELLED))
            elif resolution.resolution == RESOLUTION_FREEZE:
                frozen.append(match)
            else:
                settled = match.with_result(resolution.home_score, resolution.away_score)
                resolved.append(settled)
                effective.append(settled)
        return effective, resolved, frozen, blocking

    def _phase_context(
        self,
        season_id: str,
        phase: PhaseConfig,
        settings: TournamentModeSettings,
        matches: List[Match],
        teams: List[Team],
        all_matches: List[Match],
        tie_order: Sequence[str] = (),
    ) -> PhaseContext:
        context = PhaseContext(
            phase=phase,
            settings=settings,
            matches=matches,
            teams=teams,
            tiebreak_context=TiebreakContext(matches=matches),
        )
        context.standings = StandingsCalculator.apply_manual_tie_order(
            self.handler.calculate_standings(context), tie_order
        )
        groups = sorted({m.group for m in matches if m.group})
        context.group_standings = {
            group: StandingsCalculator.apply_manual_tie_order(
                self.handler.calculate_standings(context, group=group), tie_order
            )
            for group in groups
        }
        context.entrants = self._entrants(season_id, phase, settings, teams, all_matches)
        return context

    def _entrants(
        self,
        season_id: str,
        phase: PhaseConfig,
        settings: TournamentModeSettings,
        teams: List[Team],
        all_matches: List[Match],
    ) -> Optional[List[Team]]:
        """Teams that entered a phase, byes included.

        Entrants recorded by the store when the phase was generated come
        first. Otherwise the entry phase holds the whole field, and a phase
        fed by a league-like phase gets the teams that phase sends on when it
        is planned again.
        """
        if not self.handler.needs_entrants(phase):
            return None
        stored = self.match_store.get_entrants(season_id, phase.id)
        if stored is not None:
            return stored
        if phase.id == self.handler.get_entry_phase(len(teams), settings).id:
            return list(teams)

        sources = [
            p
            for p in self.handler.phases
            if p.is_schedulable and p.order < phase.order and p.generation_type != GEN_KNOCKOUT
        ]
        if not sources:
            return None
        source = max(sources, key=lambda p: p.order)
        source_matches = [
            m for m in all_matches if m.stage == source.id and m.status != STATUS_CANCELLED
        ]
        if not source_matches:
            return None

        plan = self.handler.plan_transition(
            self._phase_context(season_id, source, settings, source_matches, teams, all_matches)
        )
        for request in plan.requests:
            if request.phase.id == phase.id:
                return list(request.teams)
        return None

    @staticmethod
    def _already_generated(
        plan: TransitionPlan, all_matches: Sequence[Match]
    ) -> List[ValidationIssue]:
        existing = {(m.stage, m.round or 1) for m in all_matches}
        deciders = {
            (m.stage, m.round or 1, m.bracket_position)
            for m in all_matches
            if m.leg == 3
        }
        issues = []
        for request in plan.requests:
            if (request.phase.id, request.round) in existing:
                issues.append(
                    ValidationIssue(
                        "phase",
                        MSG_PHASE_ALREADY_CLOSED,
                        {"phase": request.phase.id, "round": request.round},
                    )
                )
        for match in plan.extra_matches:
            if (match.stage, match.round or 1, match.bracket_position) in deciders:
                issues.append(
                    ValidationIssue(
                        "phase",
                        MSG_PHASE_ALREADY_CLOSED,
                        {"phase": match.stage, "round": match.round},
                    )
                )
        return issues

    def _write_snapshot(self, result: TransitionResult) -> None:
        if self.snapshot_sink is None or result.snapshot is None:
            return
        try:
            self.snapshot_sink.write_snapshot(result.snapshot)
        except Exception as e:
            logger.warning(f"Could not write standings snapshot: {e}")
            result.warnings.append(
                ValidationIssue(
                    "snapshot",
                    MSG_SNAPSHOT_FAILED,
                    {"phase": result.snapshot.phase_name, "error": str(e)},
                )
            )

    def _commit(
        self,
        season_id: str,
        new_matches: Sequence[GeneratedMatch],
        resolved: Sequence[Match],
        entrants: Optional[Dict[str, List[Team]]] = None,
    ) -> None:
        try:
            self.match_store.commit_phase(
                season_id, list(new_matches), list(resolved), entrants=entrants
            )
        except MatchPersistenceException:
            logger.error(f"Commit of season {season_id} failed")
            raise
        except Exception as e:
            logger.error(f"Commit of season {season_id} failed: {e}")
            raise MatchPersistenceException(f"Could not store matches of season {season_id}: {e}") from e

    def champion_phase(self) -> Optional[PhaseConfig]:
        """Phase whose winner wins the tournament."""
        final = self.handler.find_phase(PHASE_FINAL)
        if final is not None:
            return final
        terminal = [p for p in self.handler.phases if p.is_terminal]
        return max(terminal, key=lambda p: p.order) if terminal else None

    def _is_complete(
        self,
        all_matches: Sequence[Match],
        resolved: Sequence[Match],
        frozen: Sequence[Match],
        new_matches: Sequence[GeneratedMatch],
    ) -> bool:
        """True when the champion's phase is decided and nothing is left open."""
        champion = self.champion_phase()
        if champion is None or new_matches:
            return False
        settled = {m.id for m in resolved} | {m.id for m in frozen}
        current = [m for m in all_matches if m.id not in settled] + [
            m for m in resolved if m.status != STATUS_CANCELLED
        ]
        champion_matches = [m for m in current if m.stage == champion.id]
        if not champion_matches or any(m.is_open for m in current):
            return False
        if champion.generation_type != GEN_KNOCKOUT:
            return True
        # A bracket is decided once its last round is a single settled tie
        last_round = max(m.round or 1 for m in champion_matches)
        ties = resolve_ties(
            [
                m
                for m in champion_matches
                if (m.round or 1) == last_round and m.status != STATUS_CANCELLED
            ],
            self.handler.playoff_format(self.load_settings()),
        )
        return len(ties) == 1 and ties[0].resolved
