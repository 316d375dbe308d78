"""Evaluator that echoes the pp reported by the API"""
from pathlib import Path
from typing import List, Optional

from src.base import BaseScoreEvaluator, ScoreData


class ReportedPPEvaluator(BaseScoreEvaluator):
    """
    Returns each play's live pp unchanged.

    Used when no local formula is plugged in; the local total then differs
    from the live one only through the extrapolated tail and bonus.
    """

    def evaluate(self, score: ScoreData, beatmap_path: Optional[Path], mods: List[str], ruleset: int) -> float:
        return score.pp
