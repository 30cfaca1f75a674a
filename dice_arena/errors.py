from __future__ import annotations


class DiceArenaError(Exception):
    """Base class for errors raised by dice_arena."""


class AssessmentError(DiceArenaError):
    """Raised when a roll mode receives a die count it cannot assess."""


class NotationError(DiceArenaError, ValueError):
    """Raised when a roll command string fails validation."""


class ConfigFormatError(DiceArenaError, ValueError):
    """Raised when a roll config file fails validation."""
