"""Utility functions and helpers"""

from .validators import PayloadValidationError, ScoreValidator, UserValidator, parse_score, parse_user
from .mods import decode_legacy_mods, format_mods
from .accuracy import calculate_accuracy

__all__ = [
    'PayloadValidationError',
    'ScoreValidator',
    'UserValidator',
    'parse_score',
    'parse_user',
    'decode_legacy_mods',
    'format_mods',
    'calculate_accuracy',
]
