"""Standings calculation from completed matches.

League tables rank by points and then by the configured tie-breakers in
order. Knockout tables rank by wins and describe advancement rather than
a league position.
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
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from tourneyengine.constants import (
    KNOCKOUT_POINTS_PER_LOSS,
    KNOCKOUT_POINTS_PER_WIN,
    TB_FAIR_PLAY,
    TB_GOAL_DIFFERENCE,
    TB_GOALS_AGAINST,
    TB_GOALS_SCORED,
    TB_HEAD_TO_HEAD,
    TB_WINS,
)
from tourneyengine.models.match import Match
from tourneyengine.models.settings import StandingsSettings
from tourneyengine.models.standings import StandingsRow
from tourneyengine.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class TiebreakContext:
    """Extra data some tie-breakers need.

    Without a context ``head_to_head`` and ``fair_play`` do not separate
    teams.

    Attributes:
        matches: Matches to look up direct encounters in, usually the matches
            that were used for the table itself
        fair_play_points: Disciplinary points per team, lower is better
    """

    matches: List[Match] = field(default_factory=list)
    fair_play_points: Dict[str, int] = field(default_factory=dict)


def filter_matches(
    matches: Iterable[Match],
    stage_filter: Optional[str] = None,
    group_filter: Optional[str] = None,
) -> List[Match]:
    return [
        m
        for m in matches
        if (stage_filter is None or m.stage == stage_filter)
        and (group_filter is None or m.group == group_filter)
    ]


class StandingsCalculator:
    """Builds ranked standings rows from match results.

    Supported tie-breakers:
    - goal_difference: higher is better
    - goals_scored: higher is better
    - goals_against: lower is better
    - wins: higher is better
    - head_to_head: points in matches between the tied teams (needs context)
    - fair_play: fewer disciplinary points (needs context)
    """

    def calculate(
        self,
        matches: Iterable[Match],
        settings: Optional[StandingsSettings] = None,
        stage_filter: Optional[str] = None,
        group_filter: Optional[str] = None,
        tiebreak_context: Optional[TiebreakContext] = None,
    ) -> List[StandingsRow]:
        """Calculate a league table.

        Args:
            matches: Matches of the phase; only completed ones count
            settings: Points model and tie-break order, defaults 3/1/0
            stage_filter: Only use matches of this stage
            group_filter: Only use matches of this group
            tiebreak_context: Data for head_to_head and fair_play

        Returns:
            One row per team that appears in a completed match, best first
        """
        settings = settings or StandingsSettings()
        completed = [
            m for m in filter_matches(matches, stage_filter, group_filter) if m.is_completed
        ]
        rows = self._accumulate(completed)
        for row in rows.values():
            row.points = (
                row.wins * settings.points_per_win
                + row.draws * settings.points_per_draw
                + row.losses * settings.points_per_loss
            )

        first_seen = {team_id: index for index, team_id in enumerate(rows)}
        ranked: List[StandingsRow] = []
        for block in self._points_blocks(list(rows.values())):
            ranked.extend(
                sorted(
                    block,
                    key=self._tiebreak_key(
                        block, settings, completed, tiebreak_context, first_seen
                    ),
                )
            )
        return ranked

    def calculate_knockout(
        self, matches: Iterable[Match], stage_filter: Optional[str] = None
    ) -> List[StandingsRow]:
        """Calculate the advancement table of a knockout phase.

        Points are ``3 x wins - losses`` and rows are ordered by wins, then
        goal difference. Drawn legs count as draws so every row stays
        consistent.
        """
        completed = [m for m in filter_matches(matches, stage_filter) if m.is_completed]
        rows = self._accumulate(completed)
        for row in rows.values():
            row.points = row.wins * KNOCKOUT_POINTS_PER_WIN + row.losses * KNOCKOUT_POINTS_PER_LOSS

        first_seen = {team_id: index for index, team_id in enumerate(rows)}
        return sorted(
            rows.values(),
            key=lambda r: (-r.wins, -r.goal_difference, first_seen[r.team_id]),
        )

    @staticmethod
    def apply_manual_tie_order(
        rows: Sequence[StandingsRow], order: Sequence[str]
    ) -> List[StandingsRow]:
        """Reorder teams tied on points as an operator decided.

        Inside each block of equal points the listed teams take the slots of
        the listed teams in the given order; unlisted teams keep their slot.
        """
        if not order:
            return list(rows)
        rank = {team_id: index for index, team_id in enumerate(order)}
        result: List[StandingsRow] = []
        for block in StandingsCalculator._points_blocks(list(rows)):
            slots = [i for i, row in enumerate(block) if row.team_id in rank]
            listed = sorted((block[i] for i in slots), key=lambda r: rank[r.team_id])
            block = list(block)
            for slot, row in zip(slots, listed):
                block[slot] = row
            result.extend(block)
        return result

    def calculate_head_to_head(
        self,
        team_ids: Sequence[str],
        matches: Iterable[Match],
        settings: Optional[StandingsSettings] = None,
    ) -> Dict[str, int]:
        """Points each team earned in completed matches among ``team_ids``."""
        settings = settings or StandingsSettings()
        group = set(team_ids)
        points = {team_id: 0 for team_id in team_ids}
        for match in matches:
            if not match.is_completed:
                continue
            if match.home_team_id not in group or match.away_team_id not in group:
                continue
            if match.home_team_id == match.away_team_id:
                continue
            for team_id in (match.home_team_id, match.away_team_id):
                scored, conceded = match.goals_for(team_id)
                if scored > conceded:
                    points[team_id] += settings.points_per_win
                elif scored == conceded:
                    points[team_id] += settings.points_per_draw
                else:
                    points[team_id] += settings.points_per_loss
        return points

    # ========== Internals ==========

    @staticmethod
    def _accumulate(completed: Iterable[Match]) -> Dict[str, StandingsRow]:
        rows: Dict[str, StandingsRow] = {}
        for match in completed:
            for team_id in (match.home_team_id, match.away_team_id):
                if team_id not in rows:
                    rows[team_id] = StandingsRow(team_id=team_id)
                scored, conceded = match.goals_for(team_id)
                rows[team_id].record(scored, conceded)
        return rows

    @staticmethod
    def _points_blocks(rows: List[StandingsRow]) -> List[List[StandingsRow]]:
        """Split rows into blocks of equal points, best block first.

        Rows keep their relative order inside a block.
        """
        blocks: Dict[int, List[StandingsRow]] = {}
        for row in rows:
            blocks.setdefault(row.points, []).append(row)
        return [blocks[points] for points in sorted(blocks, reverse=True)]

    def _tiebreak_key(
        self,
        block: List[StandingsRow],
        settings: StandingsSettings,
        completed: List[Match],
        context: Optional[TiebreakContext],
        first_seen: Dict[str, int],
    ) -> Callable[[StandingsRow], Any]:
        head_to_head: Dict[str, int] = {}
        if context is not None and len(block) > 1 and TB_HEAD_TO_HEAD in settings.tie_breakers:
            head_to_head = self.calculate_head_to_head(
                [r.team_id for r in block], context.matches or completed, settings
            )
        fair_play = context.fair_play_points if context is not None else {}

        criteria: List[Callable[[StandingsRow], int]] = []
        for criterion in settings.tie_breakers:
            if criterion == TB_GOAL_DIFFERENCE:
                criteria.append(lambda r: -r.goal_difference)
            elif criterion == TB_GOALS_SCORED:
                criteria.append(lambda r: -r.goals_for)
            elif criterion == TB_GOALS_AGAINST:
                criteria.append(lambda r: r.goals_against)
            elif criterion == TB_WINS:
                criteria.append(lambda r: -r.wins)
            elif criterion == TB_HEAD_TO_HEAD:
                if head_to_head:
                    criteria.append(lambda r: -head_to_head.get(r.team_id, 0))
            elif criterion == TB_FAIR_PLAY:
                if context is not None:
                    criteria.append(lambda r: fair_play.get(r.team_id, 0))
            else:
                logger.warning(f"Ignoring unknown tie-breaker {criterion!r}")

        def key(row: StandingsRow):
            return tuple(c(row) for c in criteria) + (first_seen[row.team_id],)

        return key
