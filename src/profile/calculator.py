"""Profile calculator (fetch -> evaluate -> total)"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import logging

import pandas as pd

from src.base import BaseScoreEvaluator, PlayInfo, ScoreData, UserData
from src.evaluators import ReportedPPEvaluator
from src.totals.comparison import compute_profile_comparison
from src.totals.profile_total import ProfileTotal, ProfileTotalConfig
from src.utils.accuracy import calculate_accuracy
from src.utils.beatmap_file import beatmap_display_name
from src.utils.mods import decode_legacy_mods

logger = logging.getLogger(__name__)


@dataclass
class ProfileReport:
    user: UserData
    ruleset: int
    plays: List[PlayInfo]
    total: ProfileTotal
    comparison: pd.DataFrame

    @property
    def live_pp(self) -> float:
        return self.user.pp_raw

    @property
    def local_pp(self) -> float:
        return self.total.final_computed_total

    @property
    def playcount_bonus_pp(self) -> float:
        return self.total.bonus


def build_play(client, score: ScoreData, evaluator: BaseScoreEvaluator, ruleset: int) -> PlayInfo:
    """Download (or reuse) the beatmap and evaluate one best score."""
    beatmap_path = client.get_beatmap_file(score.beatmap_id)
    mods = decode_legacy_mods(score.enabled_mods)

    local_pp = float(evaluator.evaluate(score, beatmap_path, mods, ruleset))

    return PlayInfo(
        beatmap_id=score.beatmap_id,
        beatmap=f"{score.beatmap_id} - {beatmap_display_name(beatmap_path)}",
        live_pp=score.pp,
        local_pp=local_pp,
        mods=mods,
        accuracy=calculate_accuracy(score, ruleset),
    )


def compute_profile(
    client,
    user: str,
    ruleset: int = 0,
    evaluator: Optional[BaseScoreEvaluator] = None,
    cfg: Optional[ProfileTotalConfig] = None,
    limit: int = 100,
    by_username: bool = False,
) -> ProfileReport:
    """
    Compute the local total pp of a profile and compare it with the live one.

    Args:
        client: OsuApiClient (or anything with get_user, get_user_best, get_beatmap_file)
        user: User ID (preferred) or username
        ruleset: Legacy ruleset id (0-3)
        evaluator: Per-play pp formula; defaults to ReportedPPEvaluator
        cfg: Engine configuration
        limit: Number of best scores to fetch
        by_username: Treat an all-digit ``user`` as a username

    Returns:
        ProfileReport
    """
    evaluator = evaluator or ReportedPPEvaluator()
    cfg = cfg or ProfileTotalConfig()

    user_data = client.get_user(user, ruleset, by_username=by_username)
    scores = client.get_user_best(user, ruleset, limit=limit, by_username=by_username)

    plays = [build_play(client, score, evaluator, ruleset) for score in scores]
    logger.info(f"Evaluated {len(plays)} plays for {user_data.username}")

    total, comparison = compute_profile_comparison(
        plays,
        playcount=user_data.playcount,
        reference_grand_total=user_data.pp_raw,
        cfg=cfg,
    )

    return ProfileReport(
        user=user_data,
        ruleset=ruleset,
        plays=plays,
        total=total,
        comparison=comparison,
    )
