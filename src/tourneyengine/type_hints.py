"""Type hints used in Tourney Engine."""

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

from typing import Dict, FrozenSet, List, Literal

MatchStatus = Literal["scheduled", "ongoing", "completed", "postponed", "cancelled"]

FormatKey = Literal[
    "league_only",
    "knockout",
    "groups_knockout",
    "swiss_system",
    "round_robin_final",
]

GenerationType = Literal["round_robin", "knockout", "swiss_pairing", "group_assignment"]

AdvanceFrom = Literal["top", "bottom"]

TieBreaker = Literal[
    "head_to_head",
    "goal_difference",
    "goals_scored",
    "goals_against",
    "wins",
    "fair_play",
]

SeedingMethod = Literal["random", "seeded", "manual"]
PlayoffFormat = Literal["single_match", "home_away", "best_of_3"]
PouleFormat = Literal["round_robin", "swiss"]
Resolution = Literal["cancel", "freeze", "result"]

# Unordered pair of team ids
PairKey = FrozenSet[str]
# Group name -> team ids in seeding order
GroupAssignments = Dict[str, List[str]]
# 1-indexed ranks per target group
SnakePattern = List[List[int]]
