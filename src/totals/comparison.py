"""
Live vs. local comparison

Builds the per-play comparison table (pp change and position change between
the two independently sorted tracks) and runs the profile total for both
tracks through one accessor-parameterized routine.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from src.base import PlayInfo
from src.utils.mods import format_mods
from src.totals.profile_total import (
    ProfileTotal,
    ProfileTotalConfig,
    compute_profile_total,
)

logger = logging.getLogger(__name__)

COMPARISON_COLUMNS = [
    "beatmap_id", "beatmap", "mods", "accuracy",
    "live_pp", "local_pp", "pp_change",
    "local_rank", "live_rank", "position_change",
]

ScoreAccessor = Callable[[PlayInfo], float]


def local_pp(play: PlayInfo) -> float:
    return play.local_pp


def live_pp(play: PlayInfo) -> float:
    return play.live_pp


def order_plays(plays: Sequence[PlayInfo], key: ScoreAccessor) -> List[int]:
    """Indices of ``plays`` sorted descending by ``key`` (stable for ties)."""
    return sorted(range(len(plays)), key=lambda i: key(plays[i]), reverse=True)


def track_scores(plays: Sequence[PlayInfo], key: ScoreAccessor) -> List[float]:
    """Scores of one track, sorted descending, ready for the engine."""
    return [float(key(plays[i])) for i in order_plays(plays, key)]


def build_comparison(plays: Sequence[PlayInfo]) -> pd.DataFrame:
    """
    Build the comparison table ordered by local pp.

    Returns:
        DataFrame with COMPARISON_COLUMNS. Ranks are 0-based;
        position_change = live_rank - local_rank, so a positive value means
        the play moved up under the local formula.
    """
    if not plays:
        return pd.DataFrame(columns=COMPARISON_COLUMNS)

    local_order = order_plays(plays, local_pp)
    live_order = order_plays(plays, live_pp)

    local_rank = {idx: rank for rank, idx in enumerate(local_order)}
    live_rank = {idx: rank for rank, idx in enumerate(live_order)}

    rows = []
    for idx in local_order:
        play = plays[idx]
        rows.append({
            "beatmap_id": play.beatmap_id,
            "beatmap": play.beatmap,
            "mods": format_mods(play.mods),
            "accuracy": play.accuracy,
            "live_pp": play.live_pp,
            "local_pp": play.local_pp,
            "pp_change": play.local_pp - play.live_pp,
            "local_rank": local_rank[idx],
            "live_rank": live_rank[idx],
            "position_change": live_rank[idx] - local_rank[idx],
        })

    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def compute_profile_comparison(
    plays: Sequence[PlayInfo],
    playcount: int,
    reference_grand_total: float,
    cfg: Optional[ProfileTotalConfig] = None,
) -> Tuple[ProfileTotal, pd.DataFrame]:
    """
    Total the local and live tracks of a profile and build its comparison table.

    Args:
        plays: best plays in any order
        playcount: reported ranked playcount
        reference_grand_total: live total reported by the API (pp_raw)

    Returns:
        (ProfileTotal, comparison DataFrame)
    """
    cfg = cfg or ProfileTotalConfig()
    logger.info(f"Totalling {len(plays)} plays against {playcount:,} ranked plays")

    total = compute_profile_total(
        computed_scores=track_scores(plays, local_pp),
        reference_scores=track_scores(plays, live_pp),
        playcount=playcount,
        reference_grand_total=reference_grand_total,
        cfg=cfg,
    )
    return total, build_comparison(plays)
