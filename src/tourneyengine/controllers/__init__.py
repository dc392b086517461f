"""Season controllers: phase orchestration and storage interfaces."""

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

from tourneyengine.controllers.phase_orchestrator import PhaseOrchestrator
from tourneyengine.controllers.phase_status import (
    PhaseProgress,
    PhaseStatus,
    determine_current_phase,
    determine_phase_status,
    summarize_phases,
)
from tourneyengine.controllers.stores import MatchStore, SettingsStore, SnapshotSink

__all__ = [
    "MatchStore",
    "PhaseOrchestrator",
    "PhaseProgress",
    "PhaseStatus",
    "SettingsStore",
    "SnapshotSink",
    "determine_current_phase",
    "determine_phase_status",
    "summarize_phases",
]
