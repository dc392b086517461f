"""Pairing primitives: round robin, knockout brackets, Swiss rounds and snake seeding."""

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

from tourneyengine.pairing.knockout import (
    BracketPairing,
    TieOutcome,
    arrange_bracket_seeding,
    bracket_positions,
    generate_knockout_pairings,
    knockout_stage_name,
    order_for_bracket,
    playoff_legs,
    resolve_ties,
    shuffle_teams,
)
from tourneyengine.pairing.round_robin import (
    Pairing,
    RoundRobinSchedule,
    generate_round_robin,
    total_round_robin_matches,
)
from tourneyengine.pairing.seeding import (
    apply_snake_seeding,
    distribute_serpentine,
    group_id,
    snake_pattern,
)
from tourneyengine.pairing.swiss import (
    SwissPairingResult,
    generate_swiss_pairings,
    pairing_key,
    played_pairs_from_matches,
    rank_teams,
)
