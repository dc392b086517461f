"""Standings rows and the audit snapshot written when a phase closes."""

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
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse


@dataclass
class StandingsRow:
    """Accumulated record of one team over a set of completed matches.

    The row is always derived from matches and never stored as the
    authoritative state of a team.
    """

    team_id: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def record(self, scored: int, conceded: int) -> None:
        """Add one completed match without touching points."""
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.wins += 1
        elif scored < conceded:
            self.losses += 1
        else:
            self.draws += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "played": self.played,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StandingsRow":
        return cls(
            team_id=str(data["team_id"]),
            played=data.get("played", 0),
            wins=data.get("wins", 0),
            draws=data.get("draws", 0),
            losses=data.get("losses", 0),
            goals_for=data.get("goals_for", 0),
            goals_against=data.get("goals_against", 0),
            points=data.get("points", 0),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StandingsSnapshot:
    """Standings of a phase at the moment it was closed.

    Attributes:
        season_id: Season the phase belongs to
        phase_name: Id of the closed phase
        snapshot_data: Serialized standings rows, keyed by group when the phase has groups
        taken_at: UTC timestamp of the snapshot
    """

    season_id: str
    phase_name: str
    snapshot_data: Dict[str, List[Dict[str, Any]]]
    taken_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_rows(
        cls,
        season_id: str,
        phase_name: str,
        rows: List[StandingsRow],
        group_rows: Optional[Dict[str, List[StandingsRow]]] = None,
    ) -> "StandingsSnapshot":
        data: Dict[str, List[Dict[str, Any]]] = {"overall": [r.to_dict() for r in rows]}
        for group, grouped in (group_rows or {}).items():
            data[group] = [r.to_dict() for r in grouped]
        return cls(season_id=season_id, phase_name=phase_name, snapshot_data=data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "season_id": self.season_id,
            "phase_name": self.phase_name,
            "snapshot_data": self.snapshot_data,
            "taken_at": self.taken_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StandingsSnapshot":
        taken_at = data.get("taken_at")
        if isinstance(taken_at, str):
            taken_at = isoparse(taken_at)
        elif taken_at is None:
            taken_at = _utcnow()
        if taken_at.tzinfo is None:
            taken_at = taken_at.replace(tzinfo=timezone.utc)
        return cls(
            season_id=str(data["season_id"]),
            phase_name=data["phase_name"],
            snapshot_data=data.get("snapshot_data", {}),
            taken_at=taken_at,
        )
