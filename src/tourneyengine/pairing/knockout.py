"""Knockout brackets: seeding, slot placement, legs and tie resolution."""

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
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tourneyengine.constants import (
    BRACKET_POSITIONS,
    PLAYOFF_BEST_OF_3,
    PLAYOFF_HOME_AWAY,
    PLAYOFF_SINGLE_MATCH,
    SEEDING_MANUAL,
    SEEDING_RANDOM,
    SEEDING_SEEDED,
)
from tourneyengine.exceptions import InvalidSeedingMethodException
from tourneyengine.models.match import Match
from tourneyengine.models.team import Team, sort_by_seed
from tourneyengine.utils import next_power_of_two


@dataclass(frozen=True)
class BracketPairing:
    """Two bracket slots that meet in a round.

    Either side may be empty, in which case the other team has a bye.
    """

    home: Optional[str]
    away: Optional[str]
    position: int

    @property
    def is_bye(self) -> bool:
        return self.home is None or self.away is None

    @property
    def bye_team(self) -> Optional[str]:
        if not self.is_bye:
            return None
        return self.home if self.home is not None else self.away


def bracket_positions(size: int) -> List[int]:
    """Slot index for each seed, or sequential slots for unsupported sizes."""
    if size in BRACKET_POSITIONS:
        return list(BRACKET_POSITIONS[size])
    return list(range(size))


def arrange_bracket_seeding(
    teams: Sequence[Team], bracket_size: Optional[int] = None
) -> List[Optional[Team]]:
    """Place teams into bracket slots by seed.

    Seed 1 takes slot 0, seed 2 the last slot and so on, so the best seeds
    only meet in the last rounds. Missing places are empty slots, which puts
    byes next to the best seeds.

    Args:
        teams: Teams to place, unseeded teams sort last
        bracket_size: Slot count, defaults to the next power of two

    Returns:
        List of slots, ``None`` for an empty slot
    """
    size = max(bracket_size or 0, next_power_of_two(len(teams)))
    ordered = sort_by_seed(list(teams))
    positions = bracket_positions(size)
    slots: List[Optional[Team]] = [None] * size
    for index, team in enumerate(ordered):
        slots[positions[index]] = team
    return slots


def shuffle_teams(teams: Sequence[Team], rng: Optional[random.Random] = None) -> List[Team]:
    """Fisher-Yates shuffle. Pass a seeded ``random.Random`` for reproducible draws."""
    rng = rng or random.Random()
    shuffled = list(teams)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _manual_slots(teams: Sequence[Team], bracket_size: Optional[int]) -> List[Optional[Team]]:
    """Given order is kept; the first teams get the byes of a short field."""
    size = max(bracket_size or 0, next_power_of_two(len(teams)))
    byes = size - len(teams)
    slots: List[Optional[Team]] = []
    for index, team in enumerate(teams):
        slots.append(team)
        if index < byes:
            slots.append(None)
    slots.extend([None] * (size - len(slots)))
    return slots


def order_for_bracket(
    teams: Sequence[Team],
    seeding_method: str = SEEDING_SEEDED,
    rng: Optional[random.Random] = None,
    bracket_size: Optional[int] = None,
) -> List[Optional[Team]]:
    """Order teams into bracket slots with the given seeding method.

    Raises:
        InvalidSeedingMethodException: If the method is unknown
    """
    if seeding_method == SEEDING_SEEDED:
        with_defaults = [
            team if team.seed is not None else team.with_seed(index + 1)
            for index, team in enumerate(teams)
        ]
        return arrange_bracket_seeding(with_defaults, bracket_size)
    if seeding_method == SEEDING_RANDOM:
        drawn = shuffle_teams(teams, rng)
        return arrange_bracket_seeding(
            [team.with_seed(index + 1) for index, team in enumerate(drawn)], bracket_size
        )
    if seeding_method == SEEDING_MANUAL:
        return _manual_slots(teams, bracket_size)
    raise InvalidSeedingMethodException(f"Unknown seeding method: {seeding_method!r}")


def generate_knockout_pairings(
    teams: Sequence[Team],
    seeding_method: str = SEEDING_SEEDED,
    rng: Optional[random.Random] = None,
    preserve_order: bool = False,
    bracket_size: Optional[int] = None,
) -> List[BracketPairing]:
    """Pair a knockout round.

    Slots ``2i`` and ``2i+1`` meet at bracket position ``i``.

    Args:
        teams: Teams entering the round
        seeding_method: seeded, random or manual
        rng: Random source for the random method
        preserve_order: Keep the given order, used for later rounds where the
            teams arrive in bracket order
        bracket_size: Slot count for the first round

    Returns:
        Pairings by bracket position, byes included
    """
    if preserve_order:
        slots: List[Optional[Team]] = list(teams)
        if len(slots) % 2 == 1:
            slots.append(None)
    else:
        slots = order_for_bracket(teams, seeding_method, rng, bracket_size)

    pairings = []
    for i in range(0, len(slots), 2):
        home, away = slots[i], slots[i + 1]
        if home is None and away is None:
            continue
        pairings.append(
            BracketPairing(
                home=home.id if home else None,
                away=away.id if away else None,
                position=i // 2,
            )
        )
    return pairings


def knockout_stage_name(teams_remaining: int) -> str:
    """Name of the knockout round played by ``teams_remaining`` teams."""
    names = {
        2: "final",
        4: "semi-final",
        8: "quarter-final",
        16: "round-of-16",
        32: "round-of-32",
    }
    return names.get(teams_remaining, f"round-of-{teams_remaining}")


def playoff_legs(
    home: str, away: str, playoff_format: str = PLAYOFF_SINGLE_MATCH
) -> List[Tuple[str, str, Optional[int]]]:
    """(home, away, leg) rows for one tie. The better seed hosts the first leg."""
    if playoff_format in (PLAYOFF_HOME_AWAY, PLAYOFF_BEST_OF_3):
        return [(home, away, 1), (away, home, 2)]
    return [(home, away, None)]


@dataclass
class TieOutcome:
    """State of one knockout tie after its legs were played.

    Attributes:
        position: Bracket position of the tie
        team_a: Home side of the first leg
        team_b: Away side of the first leg
        winner: Team going through, None while undecided
        loser: Team knocked out, None while undecided
        needs_decider: Best-of-3 series level after two legs
        legs_played: Completed legs
    """

    position: Optional[int]
    team_a: str
    team_b: str
    winner: Optional[str] = None
    loser: Optional[str] = None
    needs_decider: bool = False
    legs_played: int = 0

    @property
    def resolved(self) -> bool:
        return self.winner is not None


def _tie_key(match: Match) -> Tuple:
    if match.bracket_position is not None:
        return ("position", match.bracket_position)
    return ("pair", match.pair_key)


def resolve_ties(
    matches: Iterable[Match], playoff_format: str = PLAYOFF_SINGLE_MATCH
) -> List[TieOutcome]:
    """Decide every tie of a knockout round.

    Legs sharing a bracket position (or, without one, the same two teams) form
    a tie. Single matches go to the winner of the match. Two-legged ties go
    to aggregate goals, then legs won. Best-of-3 series go to the first team
    with two wins; a series still open after two legs needs a decider.
    Anything level stays unresolved.

    Returns:
        Ties ordered by bracket position
    """
    ties: Dict[Tuple, List[Match]] = {}
    for match in matches:
        ties.setdefault(_tie_key(match), []).append(match)

    outcomes = []
    for legs in ties.values():
        legs = sorted(legs, key=lambda m: (m.leg or 0))
        first = legs[0]
        outcome = TieOutcome(
            position=first.bracket_position,
            team_a=first.home_team_id,
            team_b=first.away_team_id,
        )
        played = [m for m in legs if m.is_completed]
        outcome.legs_played = len(played)
        if not played:
            outcomes.append(outcome)
            continue

        wins = {outcome.team_a: 0, outcome.team_b: 0}
        goals = {outcome.team_a: 0, outcome.team_b: 0}
        for match in played:
            for team_id in (match.home_team_id, match.away_team_id):
                scored, _ = match.goals_for(team_id)
                goals[team_id] = goals.get(team_id, 0) + scored
            if match.winner_id is not None:
                wins[match.winner_id] = wins.get(match.winner_id, 0) + 1

        a, b = outcome.team_a, outcome.team_b
        winner: Optional[str] = None
        if playoff_format == PLAYOFF_BEST_OF_3:
            if wins[a] >= 2 or wins[b] >= 2:
                winner = a if wins[a] > wins[b] else b
            elif len(played) < 3:
                outcome.needs_decider = len(played) >= 2
            elif wins[a] != wins[b]:
                winner = a if wins[a] > wins[b] else b
            elif goals[a] != goals[b]:
                winner = a if goals[a] > goals[b] else b
        elif playoff_format == PLAYOFF_HOME_AWAY:
            if goals[a] != goals[b]:
                winner = a if goals[a] > goals[b] else b
            elif wins[a] != wins[b]:
                winner = a if wins[a] > wins[b] else b
        else:
            if wins[a] != wins[b]:
                winner = a if wins[a] > wins[b] else b

        if winner is not None:
            outcome.winner = winner
            outcome.loser = b if winner == a else a
        outcomes.append(outcome)

    def _order(outcome: TieOutcome) -> Tuple[int, int]:
        if outcome.position is None:
            return (1, 0)
        return (0, outcome.position)

    return sorted(outcomes, key=_order)
