"""Remote data providers"""

from .osu_client import OsuApiClient, OsuApiError

__all__ = ['OsuApiClient', 'OsuApiError']
