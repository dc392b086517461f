"""Shared helpers for Tourney Engine modules."""

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

import logging
import uuid

PACKAGE_LOGGER_NAME = "tourneyengine"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logger(name: str) -> logging.Logger:
    """Return the logger for a module of the engine.

    The package logger only carries a NullHandler; the host application
    decides where records go.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if not name.startswith(PACKAGE_LOGGER_NAME):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def generate_id(prefix: str = "id") -> str:
    """Generate a short unique identifier with a readable prefix."""
    return f"{prefix.lower()}_{uuid.uuid4().hex[:12]}"


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def next_power_of_two(value: int) -> int:
    size = 1
    while size < value:
        size *= 2
    return size
