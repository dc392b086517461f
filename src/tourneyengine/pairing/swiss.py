"""Swiss pairing by adjacent rank with repeat avoidance.

Each team in rank order meets the nearest team it has not played. That
greedy pairing is kept whenever it repeats no earlier match; a search over
alternatives is used only to lower the number of repeats.
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

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from tourneyengine.constants import STATUS_CANCELLED, SWISS_SEARCH_NODE_LIMIT
from tourneyengine.models.match import Match
from tourneyengine.type_hints import PairKey
from tourneyengine.utils import setup_logger

logger = setup_logger(__name__)


def pairing_key(team_a: str, team_b: str) -> PairKey:
    """Unordered key of a pairing."""
    return frozenset({team_a, team_b})


def played_pairs_from_matches(matches: Iterable[Match]) -> Set[PairKey]:
    """Pairing keys of every match that was not cancelled."""
    return {m.pair_key for m in matches if m.status != STATUS_CANCELLED}


@dataclass
class SwissPairingResult:
    """Pairings of one Swiss round.

    Attributes:
        pairings: (home, away) tuples in rank order
        bye: Team sitting the round out, for odd fields
        forced_repeats: Pairings that repeat an earlier match
    """

    pairings: List[Tuple[str, str]] = field(default_factory=list)
    bye: Optional[str] = None
    forced_repeats: List[Tuple[str, str]] = field(default_factory=list)


def rank_teams(team_ids: Sequence[str], ranking: Sequence[str]) -> List[str]:
    """Sort teams by their index in ``ranking``; unranked teams go last in input order."""
    rank = {team_id: index for index, team_id in enumerate(ranking)}
    order = {team_id: index for index, team_id in enumerate(team_ids)}
    return sorted(
        team_ids,
        key=lambda t: (0, rank[t]) if t in rank else (1, order[t]),
    )


class _RepeatSearch:
    """Depth-first search for the pairing with the fewest repeats.

    Candidates for a team are tried nearest first, unplayed before played,
    so the first complete pairing found is the greedy nearest-unplayed one.
    When that pairing has no repeats it is the result. The search only
    departs from it to find a pairing with fewer repeats.
    """

    def __init__(self, ranked: List[str], played: AbstractSet[frozenset], node_limit: int):
        self.ranked = ranked
        self.played = played
        self.node_limit = node_limit
        self.nodes = 0
        self.best: Optional[List[Tuple[int, int]]] = None
        self.best_repeats = len(ranked) + 1

    def run(self) -> List[Tuple[int, int]]:
        self._search([False] * len(self.ranked), [], 0)
        return self.best or []

    def _candidates(self, i: int, paired: List[bool]) -> List[int]:
        free = [j for j in range(i + 1, len(self.ranked)) if not paired[j]]
        fresh = [j for j in free if pairing_key(self.ranked[i], self.ranked[j]) not in self.played]
        repeats = [j for j in free if j not in fresh]
        return fresh + repeats

    def _search(self, paired: List[bool], chosen: List[Tuple[int, int]], repeats: int) -> bool:
        """Returns True once the search should stop."""
        if repeats >= self.best_repeats:
            return False
        try:
            i = paired.index(False)
        except ValueError:
            self.best = list(chosen)
            self.best_repeats = repeats
            return repeats == 0

        self.nodes += 1
        if self.nodes > self.node_limit and self.best is not None:
            return True

        paired[i] = True
        for j in self._candidates(i, paired):
            is_repeat = pairing_key(self.ranked[i], self.ranked[j]) in self.played
            paired[j] = True
            chosen.append((i, j))
            stop = self._search(paired, chosen, repeats + (1 if is_repeat else 0))
            chosen.pop()
            paired[j] = False
            if stop:
                paired[i] = False
                return True
        paired[i] = False
        return False


def generate_swiss_pairings(
    team_ids: Sequence[str],
    ranking: Sequence[str] = (),
    played_pairs: AbstractSet[PairKey] = frozenset(),
    previous_byes: AbstractSet[str] = frozenset(),
    node_limit: int = SWISS_SEARCH_NODE_LIMIT,
) -> SwissPairingResult:
    """Pair one Swiss round.

    Teams are ranked by ``ranking`` and each is paired with the nearest
    unpaired team it has not met. When no such pairing exists for the whole
    field, the pairing with the fewest repeats is used and the repeats are
    reported.

    Args:
        team_ids: Teams taking part in the round
        ranking: Team ids by current standing, best first
        played_pairs: Pairing keys already played
        previous_byes: Teams that already sat a round out
        node_limit: Search budget before settling for the best pairing found

    Returns:
        SwissPairingResult
    """
    ranked = rank_teams(list(team_ids), list(ranking))
    result = SwissPairingResult()

    if len(ranked) % 2 == 1:
        # Lowest-ranked team without a previous bye sits out
        candidates = [t for t in reversed(ranked) if t not in previous_byes]
        result.bye = candidates[0] if candidates else ranked[-1]

    pool = [t for t in ranked if t != result.bye]
    index_of: Dict[str, int] = {team_id: index for index, team_id in enumerate(ranked)}

    search = _RepeatSearch(pool, played_pairs, node_limit)
    for i, j in search.run():
        team, opponent = pool[i], pool[j]
        # Home side alternates with the rank index of the team being paired
        if index_of[team] % 2 == 0:
            home, away = team, opponent
        else:
            home, away = opponent, team
        result.pairings.append((home, away))
        if pairing_key(team, opponent) in played_pairs:
            result.forced_repeats.append((home, away))

    if result.forced_repeats:
        logger.warning(
            f"Swiss round needs {len(result.forced_repeats)} repeat pairing(s): "
            f"{result.forced_repeats}"
        )
    return result
