"""Result records returned by generation and phase transitions."""

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
from typing import Any, Dict, List, Optional, Tuple

from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.phase import PhaseConfig
from tourneyengine.models.standings import StandingsRow, StandingsSnapshot
from tourneyengine.models.team import Team
from tourneyengine.utils.validation import ValidationIssue


@dataclass
class GenerationResult:
    """Fixtures produced for one phase.

    Attributes:
        success: False when nothing could be generated
        matches: Generated fixtures, in round order
        errors: Why generation failed
        warnings: Non-blocking notes such as forced repeat pairings
        byes: Teams without a fixture in the generated round(s)
        groups: Group assignment used, for phases split into groups
        forced_repeats: Swiss pairings that repeat an earlier match
        entrants: Teams as placed in a bracket, seeded in draw order after a
            random draw; empty for other phases
    """

    success: bool
    matches: List[GeneratedMatch] = field(default_factory=list)
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    byes: List[str] = field(default_factory=list)
    groups: Dict[str, List[str]] = field(default_factory=dict)
    forced_repeats: List[Tuple[str, str]] = field(default_factory=list)
    entrants: List[Team] = field(default_factory=list)

    @classmethod
    def failure(cls, field_name: str, message_key: str, **params: Any) -> "GenerationResult":
        return cls(success=False, errors=[ValidationIssue(field_name, message_key, params)])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "matches": [m.to_dict() for m in self.matches],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "byes": list(self.byes),
            "entrants": [t.to_dict() for t in self.entrants],
            "groups": {k: list(v) for k, v in self.groups.items()},
        }


@dataclass
class TransitionResult:
    """Outcome of closing (or previewing the close of) a phase.

    Attributes:
        success: False when the transition was blocked or aborted
        phase_closed: True when the phase is over, False when it continues
            with another round of its own
        next_phases: Phases that received new fixtures
        matches: New fixtures
        resolved_matches: Matches changed by manual resolutions
        standings: Standings of the closed phase, overall
        group_standings: Standings per group, for phases split into groups
        advancing: Teams moving on, per target phase
        snapshot: Audit snapshot taken at closure
        tournament_complete: True when the season has no open phase left
        errors: Why the transition failed
        warnings: Non-blocking problems, including snapshot sink failures
        blocking_matches: Open matches that need a result or a resolution
    """

    success: bool
    phase_closed: bool = False
    next_phases: List[PhaseConfig] = field(default_factory=list)
    matches: List[GeneratedMatch] = field(default_factory=list)
    resolved_matches: List[Match] = field(default_factory=list)
    standings: List[StandingsRow] = field(default_factory=list)
    group_standings: Dict[str, List[StandingsRow]] = field(default_factory=dict)
    advancing: Dict[str, List[str]] = field(default_factory=dict)
    snapshot: Optional[StandingsSnapshot] = None
    tournament_complete: bool = False
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    blocking_matches: List[Match] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "phase_closed": self.phase_closed,
            "next_phases": [p.id for p in self.next_phases],
            "matches": [m.to_dict() for m in self.matches],
            "resolved_matches": [m.to_dict() for m in self.resolved_matches],
            "standings": [r.to_dict() for r in self.standings],
            "advancing": {k: list(v) for k, v in self.advancing.items()},
            "snapshot": self.snapshot.to_dict() if self.snapshot else None,
            "tournament_complete": self.tournament_complete,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "blocking_matches": [m.to_dict() for m in self.blocking_matches],
        }
