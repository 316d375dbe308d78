"""Profile total aggregation and tail extrapolation"""

from src.totals.profile_total import (
    ProfileTotalConfig,
    ProfileTotalError,
    DegenerateFitError,
    NonFiniteScoreError,
    FitParameters,
    TrackTotal,
    ProfileTotal,
    rank_weight,
    weighted_sum,
    gauss_newton_reciprocal_fit,
    tail_terms,
    extrapolate_tail,
    extrapolate_pp,
    compute_track_total,
    compute_profile_total,
)
from src.totals.comparison import (
    build_comparison,
    compute_profile_comparison,
    track_scores,
)

__all__ = [
    'ProfileTotalConfig',
    'ProfileTotalError',
    'DegenerateFitError',
    'NonFiniteScoreError',
    'FitParameters',
    'TrackTotal',
    'ProfileTotal',
    'rank_weight',
    'weighted_sum',
    'gauss_newton_reciprocal_fit',
    'tail_terms',
    'extrapolate_tail',
    'extrapolate_pp',
    'compute_track_total',
    'compute_profile_total',
    'build_comparison',
    'compute_profile_comparison',
    'track_scores',
]
