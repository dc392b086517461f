"""Format handlers, one per tournament format."""

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

from typing import Dict

from tourneyengine.constants import (
    FORMAT_GROUPS_KNOCKOUT,
    FORMAT_KNOCKOUT,
    FORMAT_LEAGUE_ONLY,
    FORMAT_ROUND_ROBIN_FINAL,
    FORMAT_SWISS_SYSTEM,
)
from tourneyengine.exceptions import UnknownFormatException
from tourneyengine.handlers.base import FormatHandler
from tourneyengine.handlers.context import (
    GenerationContext,
    GenerationRequest,
    PhaseContext,
    TransitionPlan,
)
from tourneyengine.handlers.groups_knockout import GroupsKnockoutHandler
from tourneyengine.handlers.knockout import KnockoutHandler
from tourneyengine.handlers.league_only import LeagueOnlyHandler
from tourneyengine.handlers.round_robin_final import RoundRobinFinalHandler
from tourneyengine.handlers.swiss_system import SwissSystemHandler

HANDLERS: Dict[str, FormatHandler] = {
    FORMAT_LEAGUE_ONLY: LeagueOnlyHandler(),
    FORMAT_KNOCKOUT: KnockoutHandler(),
    FORMAT_GROUPS_KNOCKOUT: GroupsKnockoutHandler(),
    FORMAT_SWISS_SYSTEM: SwissSystemHandler(),
    FORMAT_ROUND_ROBIN_FINAL: RoundRobinFinalHandler(),
}


def get_handler(format_key: str) -> FormatHandler:
    """Handler of a format.

    Raises:
        UnknownFormatException: If no handler is registered for the key
    """
    try:
        return HANDLERS[format_key]
    except KeyError:
        raise UnknownFormatException(format_key) from None


__all__ = [
    "HANDLERS",
    "FormatHandler",
    "GenerationContext",
    "GenerationRequest",
    "GroupsKnockoutHandler",
    "KnockoutHandler",
    "LeagueOnlyHandler",
    "PhaseContext",
    "RoundRobinFinalHandler",
    "SwissSystemHandler",
    "TransitionPlan",
    "get_handler",
]
