"""Validation utilities for Tourney Engine.

Settings checks collect every problem into a ValidationResult instead of
stopping at the first one, so a form can show them all at once.
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
from typing import Any, Dict, Iterable, List, Optional, Sequence

from tourneyengine.constants import (
    MAX_POINTS,
    MIN_POINTS,
    MSG_AT_LEAST_ONE_TIE_BREAKER,
    MSG_DUPLICATE_SNAKE_POSITIONS,
    MSG_EQUAL_POULE_SIZE,
    MSG_INVALID_BOOLEAN,
    MSG_INVALID_NUMBER,
    MSG_INVALID_OPTION,
    MSG_INVALID_SNAKE_POSITION,
    MSG_MIN_TWO_POULES,
    MSG_OUT_OF_RANGE,
    TIE_BREAKERS,
)


@dataclass
class ValidationIssue:
    """One problem found while validating settings.

    Attributes:
        field: Settings field the issue refers to (camelCase, as stored)
        message_key: Translation key for the message
        params: Values to interpolate into the message
    """

    field: str
    message_key: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "messageKey": self.message_key,
            "params": dict(self.params),
        }


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        errors: Issues that make the settings unusable
        warnings: Issues worth showing that do not block generation
    """

    def __init__(
        self,
        errors: Optional[List[ValidationIssue]] = None,
        warnings: Optional[List[ValidationIssue]] = None,
    ):
        self.errors: List[ValidationIssue] = list(errors or [])
        self.warnings: List[ValidationIssue] = list(warnings or [])

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.valid

    def __repr__(self) -> str:
        if self.valid:
            return f"ValidationResult(VALID, warnings={len(self.warnings)})"
        return f"ValidationResult(INVALID, errors={[e.message_key for e in self.errors]!r})"

    def error(self, field_name: str, message_key: str, **params: Any) -> None:
        self.errors.append(ValidationIssue(field_name, message_key, params))

    def warn(self, field_name: str, message_key: str, **params: Any) -> None:
        self.warnings.append(ValidationIssue(field_name, message_key, params))

    def merge(self, other: "ValidationResult", prefix: str = "") -> "ValidationResult":
        """Fold another result into this one, optionally nesting its field names."""
        for issue in other.errors:
            self.errors.append(_prefixed(issue, prefix))
        for issue in other.warnings:
            self.warnings.append(_prefixed(issue, prefix))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _prefixed(issue: ValidationIssue, prefix: str) -> ValidationIssue:
    if not prefix:
        return issue
    return ValidationIssue(f"{prefix}.{issue.field}", issue.message_key, issue.params)


# ========== Field Checks ==========


def check_int_range(
    result: ValidationResult, field_name: str, value: Any, minimum: int, maximum: int
) -> bool:
    """Record an error unless value is an integer within [minimum, maximum].

    Returns:
        True when the value passed
    """
    # bool is an int subclass and never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        result.error(field_name, MSG_INVALID_NUMBER)
        return False
    if value < minimum or value > maximum:
        result.error(field_name, MSG_OUT_OF_RANGE, min=minimum, max=maximum)
        return False
    return True


def check_choice(
    result: ValidationResult, field_name: str, value: Any, choices: Sequence[Any]
) -> bool:
    if value not in choices:
        result.error(field_name, MSG_INVALID_OPTION, options=list(choices))
        return False
    return True


def check_bool(result: ValidationResult, field_name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        result.error(field_name, MSG_INVALID_BOOLEAN)
        return False
    return True


def check_points(result: ValidationResult, settings: Any) -> None:
    """Check the points model shared by every format with a league table."""
    check_int_range(result, "pointsPerWin", settings.points_per_win, MIN_POINTS, MAX_POINTS)
    check_int_range(result, "pointsPerDraw", settings.points_per_draw, MIN_POINTS, MAX_POINTS)
    check_int_range(result, "pointsPerLoss", settings.points_per_loss, MIN_POINTS, MAX_POINTS)


def check_tie_breakers(result: ValidationResult, tie_breakers: Iterable[Any]) -> None:
    tie_breakers = list(tie_breakers or [])
    if not tie_breakers:
        result.error("tieBreakers", MSG_AT_LEAST_ONE_TIE_BREAKER)
        return
    for criterion in tie_breakers:
        if criterion not in TIE_BREAKERS:
            result.error("tieBreakers", MSG_INVALID_OPTION, value=criterion, options=list(TIE_BREAKERS))


def check_snake_pattern(result: ValidationResult, pattern: Any) -> bool:
    """Check a snake seeding pattern: two or more equal poules, unique positive ranks."""
    if not isinstance(pattern, list) or len(pattern) < 2:
        result.error("snakeSeedingPattern", MSG_MIN_TWO_POULES)
        return False

    ok = True
    positions: List[Any] = [p for poule in pattern if isinstance(poule, list) for p in poule]
    if any(not isinstance(poule, list) or not poule for poule in pattern):
        result.error("snakeSeedingPattern", MSG_MIN_TWO_POULES)
        ok = False
    ranks = [p for p in positions if isinstance(p, int) and not isinstance(p, bool)]
    if len(ranks) != len(positions) or any(p < 1 for p in ranks):
        result.error("snakeSeedingPattern", MSG_INVALID_SNAKE_POSITION)
        ok = False
    if len(set(ranks)) != len(ranks):
        result.error("snakeSeedingPattern", MSG_DUPLICATE_SNAKE_POSITIONS)
        ok = False
    sizes = {len(poule) for poule in pattern if isinstance(poule, list)}
    if len(sizes) > 1:
        result.error("snakeSeedingPattern", MSG_EQUAL_POULE_SIZE)
        ok = False
    return ok
