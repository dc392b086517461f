"""Inputs and plans exchanged between format handlers and the orchestrator."""

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
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.phase import PhaseConfig
from tourneyengine.models.standings import StandingsRow
from tourneyengine.models.team import Team
from tourneyengine.standings.calculator import TiebreakContext
from tourneyengine.type_hints import GroupAssignments
from tourneyengine.utils.validation import ValidationIssue


@dataclass
class GenerationContext:
    """Everything a handler needs to generate the fixtures of a phase.

    Attributes:
        phase: Phase to generate
        teams: Teams taking part, already ranked or advanced by the caller
        settings: Format settings
        round: Round number of the first generated round
        standings: Current ranking, used by Swiss pairing
        played_pairs: Pairing keys already played in the phase
        previous_byes: Teams that already sat out a Swiss round
        preserve_order: Keep team order for later bracket rounds
        group_assignments: Fixed group split, instead of serpentine seeding
        rng: Random source for random bracket draws
    """

    phase: PhaseConfig
    teams: List[Team]
    settings: Any
    round: int = 1
    standings: List[StandingsRow] = field(default_factory=list)
    played_pairs: Set[frozenset] = field(default_factory=set)
    previous_byes: Set[str] = field(default_factory=set)
    preserve_order: bool = False
    group_assignments: Optional[GroupAssignments] = None
    rng: Optional[random.Random] = None


@dataclass
class PhaseContext:
    """A phase with its matches, as seen when ranking or closing it.

    Attributes:
        phase: The phase
        settings: Format settings
        matches: Matches of the phase, manual resolutions applied
        teams: All teams of the season
        standings: Overall standings of the phase
        group_standings: Standings per group, when the phase has groups
        entrants: Teams that entered the phase, when byes make them differ
            from the teams found in its matches
        tiebreak_context: Data for head_to_head and fair_play
    """

    phase: PhaseConfig
    settings: Any
    matches: List[Match] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    standings: List[StandingsRow] = field(default_factory=list)
    group_standings: Dict[str, List[StandingsRow]] = field(default_factory=dict)
    entrants: Optional[List[Team]] = None
    tiebreak_context: Optional[TiebreakContext] = None

    @property
    def team_lookup(self) -> Dict[str, Team]:
        return {team.id: team for team in self.teams}


@dataclass
class GenerationRequest:
    """A phase the orchestrator must generate once the current phase closes."""

    phase: PhaseConfig
    teams: List[Team]
    round: int = 1
    preserve_order: bool = False
    standings: List[StandingsRow] = field(default_factory=list)
    played_pairs: Set[frozenset] = field(default_factory=set)
    previous_byes: Set[str] = field(default_factory=set)

    def to_context(self, settings: Any, rng: Optional[random.Random] = None) -> GenerationContext:
        return GenerationContext(
            phase=self.phase,
            teams=list(self.teams),
            settings=settings,
            round=self.round,
            standings=list(self.standings),
            played_pairs=set(self.played_pairs),
            previous_byes=set(self.previous_byes),
            preserve_order=self.preserve_order,
            rng=rng,
        )


@dataclass
class TransitionPlan:
    """What should happen when a phase is closed.

    Attributes:
        phase_closed: False when the phase continues with another round
        requests: Phases (or further rounds) to generate
        extra_matches: Fixtures decided without a generator, e.g. deciders
        advancing: Team ids moving on, per target phase
        errors: Why the phase cannot be closed
        warnings: Non-blocking notes
    """

    phase_closed: bool = True
    requests: List[GenerationRequest] = field(default_factory=list)
    extra_matches: List[GeneratedMatch] = field(default_factory=list)
    advancing: Dict[str, List[str]] = field(default_factory=dict)
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
