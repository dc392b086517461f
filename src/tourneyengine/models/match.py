"""Match records and the rows written when a phase is generated."""

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

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from tourneyengine.constants import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_SCHEDULED,
)


@dataclass
class Match:
    """A fixture between two teams inside one phase.

    Attributes:
        home_team_id: Home side
        away_team_id: Away side
        stage: Phase id the match belongs to
        round: Sequence number within the phase
        status: One of scheduled, ongoing, completed, postponed, cancelled
        home_score: Goals scored by the home side once played
        away_score: Goals scored by the away side once played
        id: Store identifier, None until persisted
        group: Group or poule name for phases split into groups
        bracket_position: Slot of the tie inside a knockout round
        leg: Leg number for multi-leg ties
    """

    home_team_id: str
    away_team_id: str
    stage: str
    round: Optional[int] = None
    status: str = STATUS_SCHEDULED
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    id: Optional[str] = None
    group: Optional[str] = None
    bracket_position: Optional[int] = None
    leg: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return (
            self.status == STATUS_COMPLETED
            and self.home_score is not None
            and self.away_score is not None
        )

    @property
    def is_open(self) -> bool:
        """True while the match still needs a result or a resolution."""
        return self.status not in (STATUS_COMPLETED, STATUS_CANCELLED)

    @property
    def pair_key(self) -> frozenset:
        return frozenset({self.home_team_id, self.away_team_id})

    @property
    def winner_id(self) -> Optional[str]:
        if not self.is_completed or self.home_score == self.away_score:
            return None
        return self.home_team_id if self.home_score > self.away_score else self.away_team_id

    @property
    def loser_id(self) -> Optional[str]:
        winner = self.winner_id
        if winner is None:
            return None
        return self.away_team_id if winner == self.home_team_id else self.home_team_id

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def goals_for(self, team_id: str) -> Tuple[int, int]:
        """(scored, conceded) for one side of a completed match."""
        if team_id == self.home_team_id:
            return self.home_score or 0, self.away_score or 0
        return self.away_score or 0, self.home_score or 0

    def with_result(self, home_score: int, away_score: int) -> "Match":
        return replace(
            self, home_score=home_score, away_score=away_score, status=STATUS_COMPLETED
        )

    def with_status(self, status: str) -> "Match":
        return replace(self, status=status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "stage": self.stage,
            "round": self.round,
            "status": self.status,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "group": self.group,
            "bracket_position": self.bracket_position,
            "leg": self.leg,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        return cls(
            id=data.get("id"),
            home_team_id=str(data["home_team_id"]),
            away_team_id=str(data["away_team_id"]),
            stage=data["stage"],
            round=data.get("round"),
            status=data.get("status", STATUS_SCHEDULED),
            home_score=data.get("home_score"),
            away_score=data.get("away_score"),
            group=data.get("group"),
            bracket_position=data.get("bracket_position"),
            leg=data.get("leg"),
        )


@dataclass
class GeneratedMatch:
    """A fixture produced by generation, written to the store as scheduled."""

    home_team_id: str
    away_team_id: str
    stage: str
    round: Optional[int] = None
    group: Optional[str] = None
    bracket_position: Optional[int] = None
    leg: Optional[int] = None

    def to_match(self, match_id: Optional[str] = None) -> Match:
        return Match(
            id=match_id,
            home_team_id=self.home_team_id,
            away_team_id=self.away_team_id,
            stage=self.stage,
            round=self.round,
            status=STATUS_SCHEDULED,
            group=self.group,
            bracket_position=self.bracket_position,
            leg=self.leg,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "stage": self.stage,
            "round": self.round,
            "status": STATUS_SCHEDULED,
        }
        for key in ("group", "bracket_position", "leg"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
