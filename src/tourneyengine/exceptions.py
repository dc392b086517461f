"""Exceptions for use in Tourney Engine.

Validation problems and generation failures are returned as data. These
exceptions cover the conditions a caller cannot recover from inline.
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


# ========== Base Application Exception ==========


class TourneyEngineException(Exception):
    """Base exception for all Tourney Engine errors.

    Catching this class catches every error raised by the engine.
    """

    pass


# ========== Format Exceptions ==========


class FormatException(TourneyEngineException):
    """Base exception for format lookup errors."""

    pass


class UnknownFormatException(FormatException):
    """Raised when no format definition or handler exists for a key."""

    def __init__(self, format_key: str):
        super().__init__(f"Unknown tournament format: {format_key!r}")
        self.format_key = format_key


# ========== Phase Exceptions ==========


class PhaseException(TourneyEngineException):
    """Base exception for phase graph errors."""

    pass


class PhaseNotFoundException(PhaseException):
    """Raised when a phase id is not part of the active format."""

    def __init__(self, format_key: str, phase_id: str):
        super().__init__(f"Phase {phase_id!r} does not exist in format {format_key!r}")
        self.format_key = format_key
        self.phase_id = phase_id


# ========== Pairing Exceptions ==========


class PairingException(TourneyEngineException):
    """Base exception for pairing primitive errors."""

    pass


class InvalidSeedingMethodException(PairingException):
    """Raised when an unknown bracket seeding method is requested."""

    pass


# ========== Persistence Exceptions ==========


class PersistenceException(TourneyEngineException):
    """Base exception for failures reported by external stores."""

    pass


class MatchPersistenceException(PersistenceException):
    """Raised when the match batch of a phase transition could not be committed.

    Nothing from the transition is considered applied when this is raised.
    """

    pass


class SnapshotException(PersistenceException):
    """Raised by snapshot sinks when an audit snapshot cannot be written."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(TourneyEngineException):
    """Base exception for configuration errors."""

    pass


class InvalidSettingsException(ConfigurationException):
    """Raised when a stored settings payload cannot be read at all."""

    pass
