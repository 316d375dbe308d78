"""Base classes for ProfilePP components"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class UserData:
    """Standardized user profile structure (get_user)"""
    user_id: int
    username: str
    playcount: int
    pp_raw: float


@dataclass(frozen=True)
class ScoreData:
    """Standardized best-score structure (get_user_best)"""
    beatmap_id: int
    enabled_mods: int
    max_combo: int
    count300: int
    count100: int
    count50: int
    count_miss: int
    count_katu: int
    count_geki: int
    pp: float
    score_id: Optional[int] = None


@dataclass(frozen=True)
class PlayInfo:
    """A best play with both its live and locally computed pp"""
    beatmap_id: int
    beatmap: str
    live_pp: float
    local_pp: float
    mods: List[str] = field(default_factory=list)
    accuracy: float = 0.0


class BaseScoreEvaluator(ABC):
    """Base class for per-play pp formulas"""

    @abstractmethod
    def evaluate(self, score: ScoreData, beatmap_path: Optional[Path], mods: List[str], ruleset: int) -> float:
        """Return the pp value of a single play"""
        pass


class BaseValidator(ABC):
    """Base class for payload validators"""

    @abstractmethod
    def validate(self, data: Dict) -> tuple[bool, Optional[str]]:
        """Validate data, return (is_valid, error_message)"""
        pass
