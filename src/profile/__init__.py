"""Profile pp computation"""

from src.profile.calculator import (
    ProfileReport,
    build_play,
    compute_profile,
)

__all__ = [
    'ProfileReport',
    'build_play',
    'compute_profile',
]
