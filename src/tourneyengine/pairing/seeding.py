"""Snake seeding of ranked teams into groups and poules."""

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

import string
from typing import Optional, Sequence

from tourneyengine.models.team import Team, sort_by_seed
from tourneyengine.type_hints import GroupAssignments, SnakePattern


def group_id(index: int) -> str:
    """``group_a``, ``group_b``, ... then numbered ids past the alphabet."""
    if index < len(string.ascii_lowercase):
        return f"group_{string.ascii_lowercase[index]}"
    return f"group_{index + 1}"


def apply_snake_seeding(
    ranked_team_ids: Sequence[str],
    pattern: Sequence[Sequence[int]],
    group_names: Optional[Sequence[str]] = None,
) -> GroupAssignments:
    """Split a ranking into groups following a snake pattern.

    Each pattern entry lists the 1-indexed ranks that go into one group, e.g.
    ``[[1, 4, 5, 8], [2, 3, 6, 7]]``. Ranks past the end of the ranking are
    skipped.

    Args:
        ranked_team_ids: Team ids, best first
        pattern: Ranks per target group
        group_names: Name per pattern entry, defaults to group ids

    Returns:
        Group name -> team ids in pattern order
    """
    groups: GroupAssignments = {}
    for index, ranks in enumerate(pattern):
        if group_names is not None and index < len(group_names):
            name = group_names[index]
        else:
            name = group_id(index)
        groups[name] = [
            ranked_team_ids[rank - 1]
            for rank in ranks
            if 1 <= rank <= len(ranked_team_ids)
        ]
    return groups


def snake_pattern(team_count: int, group_count: int) -> SnakePattern:
    """Serpentine pattern of 1-indexed ranks for ``team_count`` teams."""
    pattern: SnakePattern = [[] for _ in range(max(group_count, 0))]
    if not pattern:
        return pattern
    for index in range(team_count):
        lap, offset = divmod(index, group_count)
        slot = offset if lap % 2 == 0 else group_count - 1 - offset
        pattern[slot].append(index + 1)
    return pattern


def distribute_serpentine(teams: Sequence[Team], group_count: int) -> GroupAssignments:
    """Deal seeded teams into groups forward, then backward, and so on.

    With 4 groups seeds 1-4 open groups A-D, seeds 5-8 go D-A, seeds 9-12
    go A-D again.
    """
    ordered = [team.id for team in sort_by_seed(list(teams))]
    return apply_snake_seeding(ordered, snake_pattern(len(ordered), group_count))
