"""Tournament format definitions."""

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

from tourneyengine.formats.registry import (
    FORMAT_DEFINITIONS,
    FormatDefinition,
    find_phase,
    get_all_definitions,
    get_default_settings,
    get_format_definition,
    get_next_phase,
    get_phase_by_id,
    get_phases,
    get_phases_at_order,
    get_schedulable_phases,
    is_valid_format_key,
    normalize_format_key,
    normalize_phase_id,
)
