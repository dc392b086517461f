"""Progress of the phases of a season, derived from match statuses."""

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

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from tourneyengine.constants import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_ONGOING,
    STATUS_SCHEDULED,
)
from tourneyengine.models.match import Match
from tourneyengine.models.phase import PhaseConfig


class PhaseStatus(Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class PhaseProgress:
    """Match counts of one phase.

    Attributes
    ----------
    phase_id : str
        Stage the counts refer to.
    total_matches : int
        Matches of the phase, cancelled ones excluded.
    completed_matches : int
        Matches with a final result.
    scheduled_matches : int
        Matches not started yet.
    status : PhaseStatus
        Overall state of the phase.
    """

    phase_id: str
    total_matches: int
    completed_matches: int
    scheduled_matches: int
    status: PhaseStatus

    def to_dict(self) -> Dict[str, object]:
        return {
            "phase_id": self.phase_id,
            "total_matches": self.total_matches,
            "completed_matches": self.completed_matches,
            "scheduled_matches": self.scheduled_matches,
            "status": self.status.value,
        }


def determine_phase_status(matches: Iterable[Match]) -> PhaseStatus:
    """Pending without matches, completed when all are played, in progress once one is."""
    played = [m for m in matches if m.status != STATUS_CANCELLED]
    if not played:
        return PhaseStatus.PENDING
    completed = sum(1 for m in played if m.status == STATUS_COMPLETED)
    if completed == len(played):
        return PhaseStatus.COMPLETED
    if completed > 0 or any(m.status == STATUS_ONGOING for m in played):
        return PhaseStatus.IN_PROGRESS
    return PhaseStatus.SCHEDULED


def summarize_phases(
    phases: Sequence[PhaseConfig], matches: Sequence[Match]
) -> Dict[str, PhaseProgress]:
    """Progress of every schedulable phase, keyed by phase id."""
    summary: Dict[str, PhaseProgress] = {}
    for phase in phases:
        if not phase.is_schedulable:
            continue
        stage_matches = [
            m for m in matches if m.stage == phase.id and m.status != STATUS_CANCELLED
        ]
        summary[phase.id] = PhaseProgress(
            phase_id=phase.id,
            total_matches=len(stage_matches),
            completed_matches=sum(1 for m in stage_matches if m.status == STATUS_COMPLETED),
            scheduled_matches=sum(1 for m in stage_matches if m.status == STATUS_SCHEDULED),
            status=determine_phase_status(stage_matches),
        )
    return summary


def determine_current_phase(
    phases: Sequence[PhaseConfig], matches: Sequence[Match]
) -> Optional[PhaseConfig]:
    """Latest phase that has matches and is not completed yet.

    Falls back to the latest phase with matches, or None for a season that
    has not started.
    """
    summary = summarize_phases(phases, matches)
    started: List[PhaseConfig] = [
        p for p in phases if p.id in summary and summary[p.id].status != PhaseStatus.PENDING
    ]
    if not started:
        return None
    open_phases = [p for p in started if summary[p.id].status != PhaseStatus.COMPLETED]
    if open_phases:
        return max(open_phases, key=lambda p: p.order)
    return max(started, key=lambda p: p.order)
