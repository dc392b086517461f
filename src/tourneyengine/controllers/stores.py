"""Interfaces of the storage the orchestrator talks to.

Hosts implement these against their database. In-memory versions for tests
and tooling live in ``tourneyengine.testing``.
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
from typing import Any, Dict, List, Optional, Sequence

from tourneyengine.models.match import GeneratedMatch, Match
from tourneyengine.models.standings import StandingsSnapshot
from tourneyengine.models.team import Team


class MatchStore(ABC):
    """Teams and matches of seasons."""

    @abstractmethod
    def get_teams(self, season_id: str) -> List[Team]:
        """Teams registered for a season, in registration order."""

    @abstractmethod
    def get_matches(self, season_id: str, stage: Optional[str] = None) -> List[Match]:
        """Matches of a season, optionally only those of one stage."""

    @abstractmethod
    def commit_phase(
        self,
        season_id: str,
        new_matches: Sequence[GeneratedMatch],
        resolved_matches: Sequence[Match],
        entrants: Optional[Dict[str, List[Team]]] = None,
    ) -> List[Match]:
        """Store the outcome of a phase transition as one unit.

        Either every new match is inserted and every resolved match updated,
        or nothing is changed and an exception is raised. ``entrants`` maps
        each newly started phase to the teams that entered it, as seeded.

        Returns:
            The inserted matches with their ids
        """

    def get_entrants(self, season_id: str, phase_id: str) -> Optional[List[Team]]:
        """Teams recorded as entering a phase, None when unknown.

        Stores that do not keep entrants return None. Byes are then rebuilt
        from the standings of the earlier phase, without manual tie orders.
        """
        return None


class SettingsStore(ABC):
    @abstractmethod
    def get_settings(self, tournament_mode_id: str) -> Optional[Dict[str, Any]]:
        """Stored settings payload of a tournament mode, None when it has none."""


class SnapshotSink(ABC):
    @abstractmethod
    def write_snapshot(self, snapshot: StandingsSnapshot) -> None:
        """Persist an audit snapshot of standings taken at phase closure."""
