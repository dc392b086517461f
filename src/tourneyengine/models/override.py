"""Operator overrides supplied when a phase cannot close on its own."""

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
from typing import Any, Dict, List, Optional

RESOLUTION_CANCEL = "cancel"
RESOLUTION_FREEZE = "freeze"
RESOLUTION_RESULT = "result"
RESOLUTIONS = (RESOLUTION_CANCEL, RESOLUTION_FREEZE, RESOLUTION_RESULT)


@dataclass
class MatchResolution:
    """How an open match is settled when its phase is closed.

    Attributes:
        resolution: ``cancel`` drops the match, ``freeze`` leaves it open but
            lets the phase close, ``result`` assigns the given score
        home_score: Score for ``result`` resolutions
        away_score: Score for ``result`` resolutions
    """

    resolution: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    def __post_init__(self):
        if self.resolution not in RESOLUTIONS:
            raise ValueError(f"Unknown match resolution: {self.resolution!r}")
        if self.resolution == RESOLUTION_RESULT and (
            self.home_score is None or self.away_score is None
        ):
            raise ValueError("A result resolution needs both scores")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"resolution": self.resolution}
        if self.resolution == RESOLUTION_RESULT:
            data["home_score"] = self.home_score
            data["away_score"] = self.away_score
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchResolution":
        return cls(
            resolution=data["resolution"],
            home_score=data.get("home_score"),
            away_score=data.get("away_score"),
        )


@dataclass
class ManualOverride:
    """Match resolutions plus an explicit order for teams tied on points."""

    resolved_matches: Dict[str, MatchResolution] = field(default_factory=dict)
    tie_breakers: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def tie_order(self) -> List[str]:
        return list(self.tie_breakers.get("points", []))

    def resolution_for(self, match_id: Optional[str]) -> Optional[MatchResolution]:
        if match_id is None:
            return None
        return self.resolved_matches.get(match_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolved_matches": {k: v.to_dict() for k, v in self.resolved_matches.items()},
            "tie_breakers": {k: list(v) for k, v in self.tie_breakers.items()},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ManualOverride":
        data = data or {}
        return cls(
            resolved_matches={
                str(match_id): MatchResolution.from_dict(res)
                for match_id, res in (data.get("resolved_matches") or {}).items()
            },
            tie_breakers={
                key: [str(t) for t in teams]
                for key, teams in (data.get("tie_breakers") or {}).items()
            },
        )
