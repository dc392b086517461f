"""Round-robin scheduling with the circle method."""

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
from typing import Dict, List, Optional, Sequence

from tourneyengine.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class Pairing:
    """A home/away fixture inside a numbered round."""

    home: str
    away: str
    round: int


@dataclass
class RoundRobinSchedule:
    """Full round-robin schedule.

    Attributes:
        pairings: Fixtures in round order
        byes: Round number -> team without a fixture that round (odd fields)
        rounds_per_leg: Rounds in one pass through the field
    """

    pairings: List[Pairing] = field(default_factory=list)
    byes: Dict[int, str] = field(default_factory=dict)
    rounds_per_leg: int = 0

    @property
    def round_count(self) -> int:
        return max((p.round for p in self.pairings), default=0)

    def pairings_for_round(self, round_number: int) -> List[Pairing]:
        return [p for p in self.pairings if p.round == round_number]


def generate_round_robin(
    team_ids: Sequence[str], include_return_games: bool = False
) -> RoundRobinSchedule:
    """Generate a round-robin schedule with the circle method.

    The first team stays fixed and the others rotate one slot per round. Team
    order is significant and never re-sorted, so the same input always gives
    the same schedule.

    Args:
        team_ids: Teams in scheduling order
        include_return_games: Append the mirrored second leg

    Returns:
        RoundRobinSchedule with ``n-1`` rounds per leg (``n`` padded to even)
    """
    slots: List[Optional[str]] = list(team_ids)
    if len(slots) < 2:
        return RoundRobinSchedule()
    if len(slots) % 2 == 1:
        # Empty slot: whoever meets it sits the round out
        slots.append(None)

    n = len(slots)
    rounds_per_leg = n - 1
    schedule = RoundRobinSchedule(rounds_per_leg=rounds_per_leg)

    for round_index in range(rounds_per_leg):
        round_number = round_index + 1
        for i in range(n // 2):
            home = slots[i]
            away = slots[n - 1 - i]
            if home is None or away is None:
                schedule.byes[round_number] = away if home is None else home
                continue
            schedule.pairings.append(Pairing(home=home, away=away, round=round_number))
        # Rotate everything but the fixed first slot
        slots.insert(1, slots.pop())

    if include_return_games:
        first_leg = list(schedule.pairings)
        for pairing in first_leg:
            schedule.pairings.append(
                Pairing(
                    home=pairing.away,
                    away=pairing.home,
                    round=pairing.round + rounds_per_leg,
                )
            )
        for round_number, team_id in list(schedule.byes.items()):
            schedule.byes[round_number + rounds_per_leg] = team_id

    logger.debug(
        f"Round robin for {len(team_ids)} teams: {len(schedule.pairings)} matches "
        f"over {schedule.round_count} rounds"
    )
    return schedule


def total_round_robin_matches(team_count: int, double: bool = False) -> int:
    """Number of fixtures a round robin produces for ``team_count`` teams."""
    if team_count < 2:
        return 0
    single = team_count * (team_count - 1) // 2
    return single * 2 if double else single
