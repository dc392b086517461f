"""Static phase descriptions used by the format registry."""

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

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from tourneyengine.constants import ADVANCE_TOP, PHASE_START


@dataclass(frozen=True)
class MatchGenerationConfig:
    """How the fixtures of a phase are produced.

    Attributes
    ----------
    type : str
        One of round_robin, knockout, swiss_pairing, group_assignment.
    include_return_games : bool or None
        Double fixture flag. None defers to the format settings.
    bracket_size : int or None
        Number of bracket slots for knockout phases.
    """

    type: str
    include_return_games: Optional[bool] = None
    bracket_size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.include_return_games is not None:
            data["includeReturnGames"] = self.include_return_games
        if self.bracket_size is not None:
            data["bracketSize"] = self.bracket_size
        return data


@dataclass(frozen=True)
class AdvancementRule:
    """How many ranked teams move from a phase into another one.

    Attributes
    ----------
    count : int
        Number of teams taken.
    from_ : str
        ``top`` or ``bottom`` of the ranking.
    to_phase : str
        Target phase id.
    from_group : str or None
        Restrict the ranking to one group.
    """

    count: int
    from_: str
    to_phase: str
    from_group: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "count": self.count,
            "from": self.from_,
            "toPhase": self.to_phase,
        }
        if self.from_group is not None:
            data["fromGroup"] = self.from_group
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvancementRule":
        return cls(
            count=int(data["count"]),
            from_=data.get("from", ADVANCE_TOP),
            to_phase=data["toPhase"],
            from_group=data.get("fromGroup"),
        )


@dataclass(frozen=True)
class PhaseConfig:
    """One phase of a tournament format.

    Attributes
    ----------
    id : str
        Phase id, also the ``stage`` of its matches.
    name_key : str
        Translation key of the display name.
    order : int
        Position in the phase sequence. Phases may share an order.
    match_generation : MatchGenerationConfig
        Fixture generation strategy.
    advancement_rules : tuple of AdvancementRule
        Where ranked teams go once the phase closes.
    is_terminal : bool
        True when nothing follows the phase.
    """

    id: str
    name_key: str
    order: int
    match_generation: MatchGenerationConfig
    advancement_rules: Tuple[AdvancementRule, ...] = ()
    is_terminal: bool = False

    @property
    def is_schedulable(self) -> bool:
        return self.id != PHASE_START

    @property
    def generation_type(self) -> str:
        return self.match_generation.type

    @property
    def bracket_size(self) -> Optional[int]:
        return self.match_generation.bracket_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nameKey": self.name_key,
            "order": self.order,
            "matchGeneration": self.match_generation.to_dict(),
            "advancementRules": [r.to_dict() for r in self.advancement_rules],
            "isTerminal": self.is_terminal,
        }
