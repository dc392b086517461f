"""Teams as the engine sees them."""

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
from typing import Any, Dict, List, Optional

from tourneyengine.constants import UNSEEDED_SORT_KEY


@dataclass(frozen=True)
class Team:
    """A participating team.

    Attributes:
        id: Opaque identifier owned by the team registry
        seed: Rank used for bracket and Swiss ordering, None for insertion order
        name: Display name, informational only
    """

    id: str
    seed: Optional[int] = None
    name: str = ""

    @property
    def seed_sort_key(self) -> int:
        return self.seed if self.seed is not None else UNSEEDED_SORT_KEY

    def with_seed(self, seed: Optional[int]) -> "Team":
        return Team(id=self.id, seed=seed, name=self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "seed": self.seed, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        seed = data.get("seed")
        return cls(
            id=str(data["id"]),
            seed=int(seed) if seed is not None else None,
            name=data.get("name", ""),
        )


def sort_by_seed(teams: List[Team]) -> List[Team]:
    """Sort ascending by seed; unseeded teams go last in their given order."""
    return sorted(teams, key=lambda t: t.seed_sort_key)


def seed_in_order(team_ids: List[str], lookup: Dict[str, Team]) -> List[Team]:
    """Build teams seeded 1..n in the order given, e.g. from a ranking."""
    seeded = []
    for position, team_id in enumerate(team_ids):
        base = lookup.get(team_id, Team(id=team_id))
        seeded.append(base.with_seed(position + 1))
    return seeded
