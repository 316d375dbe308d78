from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple
import logging
import math
import numpy as np

logger = logging.getLogger(__name__)


# =========================
# Configuration
# =========================
@dataclass
class ProfileTotalConfig:
    # Rank decay (top play weighs 1.0)
    DECAY: float = 0.95

    # Tail extrapolation
    MIN_SAMPLE_FOR_FIT: int = 100  # fewer observed plays -> no tail
    FIT_ITERATIONS: int = 1000     # fixed Gauss-Newton iteration count

    @classmethod
    def from_settings(cls, profile_config: Optional[dict] = None) -> "ProfileTotalConfig":
        """Build a config from the PROFILE_CONFIG mapping in config.settings."""
        if profile_config is None:
            from config.settings import PROFILE_CONFIG
            profile_config = PROFILE_CONFIG
        return cls(
            DECAY=float(profile_config.get('decay', cls.DECAY)),
            MIN_SAMPLE_FOR_FIT=int(profile_config.get('min_sample_for_fit', cls.MIN_SAMPLE_FOR_FIT)),
            FIT_ITERATIONS=int(profile_config.get('fit_iterations', cls.FIT_ITERATIONS)),
        )


# =========================
# Errors
# =========================
class ProfileTotalError(ValueError):
    """Base error for the aggregation / extrapolation engine"""


class DegenerateFitError(ProfileTotalError):
    """The 2x2 normal-equations matrix cannot be inverted"""


class NonFiniteScoreError(ProfileTotalError):
    """A score is NaN or infinite"""


# =========================
# Results
# =========================
@dataclass(frozen=True)
class FitParameters:
    """score(n) ~= b0 + b1 / n for 1-based rank n"""
    b0: float
    b1: float

    def predict(self, n: int) -> float:
        return self.b0 + self.b1 / n


@dataclass(frozen=True)
class TrackTotal:
    observed_weighted_sum: float
    extrapolated_tail: float
    fit: Optional[FitParameters] = None

    @property
    def total(self) -> float:
        return self.observed_weighted_sum + self.extrapolated_tail


@dataclass(frozen=True)
class ProfileTotal:
    computed: TrackTotal
    reference: TrackTotal
    reference_grand_total: float

    @property
    def bonus(self) -> float:
        # Approximation: whatever the play-derived reference total misses
        # is assumed to carry over unchanged to the computed track.
        return self.reference_grand_total - self.reference.total

    @property
    def final_computed_total(self) -> float:
        return self.computed.total + self.bonus


# =========================
# Utilities
# =========================
def _as_scores(scores: Sequence[float]) -> np.ndarray:
    arr = np.asarray(scores, dtype=float)
    if arr.ndim != 1:
        raise ProfileTotalError(f"Scores must be a flat sequence, got shape {arr.shape}")
    bad = ~np.isfinite(arr)
    if bad.any():
        positions = np.flatnonzero(bad).tolist()
        raise NonFiniteScoreError(f"Non-finite scores at ranks {positions}")
    return arr


def rank_weight(rank: int, cfg: Optional[ProfileTotalConfig] = None) -> float:
    """Weight of the play at 0-based ``rank``: DECAY ** rank."""
    cfg = cfg or ProfileTotalConfig()
    return cfg.DECAY ** rank


def weighted_sum(scores: Sequence[float], cfg: Optional[ProfileTotalConfig] = None) -> float:
    """
    Sum an ordered score sequence with rank-decay weights.

    ``scores`` must already be sorted descending; the position in the
    sequence is the rank, so reordering the input changes the result.
    """
    cfg = cfg or ProfileTotalConfig()
    arr = _as_scores(scores)
    total = 0.0
    for rank, score in enumerate(arr):
        total += rank_weight(rank, cfg) * float(score)
    return total


# =========================
# Reciprocal curve fit
# =========================
def gauss_newton_reciprocal_fit(scores: Sequence[float],
                                cfg: Optional[ProfileTotalConfig] = None) -> FitParameters:
    """
    Fit score(n) = b0 + b1/n to ordered scores using Gauss-Newton.

    The residual of rank n is r_n = y_n - (b0 + b1/n), so each Jacobian row is
    (-1, -1/n) and does not depend on the parameters. J^T J and the step
    rows are therefore computed once outside the iteration loop:

        b <- b - (J^T J)^-1 J^T r

    Starts from b0 = top score, b1 = 1 and runs a fixed number of
    iterations (cfg.FIT_ITERATIONS).

    Raises:
        NonFiniteScoreError: a score is NaN or infinite
        DegenerateFitError: fewer than two scores, or a singular J^T J
    """
    cfg = cfg or ProfileTotalConfig()
    y = _as_scores(scores)
    N = len(y)
    if N < 2:
        raise DegenerateFitError(f"Reciprocal fit needs at least 2 scores, got {N}")

    b = np.array([y[0], 1.0])

    n = np.arange(1, N + 1, dtype=float)
    recip = 1.0 / n

    # J^T J = [[N, sum 1/n], [sum 1/n, sum 1/n^2]]
    m00 = float(N)
    m01 = float(np.sum(recip))
    m10 = m01
    m11 = float(np.sum(recip ** 2))

    det = m00 * m11 - m01 * m10
    if det == 0 or not math.isfinite(det):
        raise DegenerateFitError(f"Singular normal matrix (det={det}) for {N} scores")

    inv00, inv01 = m11 / det, -m01 / det
    inv10, inv11 = -m10 / det, m00 / det

    # step rows: -(J^T J)^-1 [1, 1/n]^T
    s0 = -(inv00 + inv01 * recip)
    s1 = -(inv10 + inv11 * recip)

    for _ in range(cfg.FIT_ITERATIONS):
        residuals = y - b[0] - b[1] * recip
        b[0] -= float(np.dot(residuals, s0))
        b[1] -= float(np.dot(residuals, s1))

    fit = FitParameters(b0=float(b[0]), b1=float(b[1]))
    logger.debug(f"Reciprocal fit over {N} plays: b0={fit.b0:.4f}, b1={fit.b1:.4f}")
    return fit


# =========================
# Tail extrapolation
# =========================
def tail_terms(fit: FitParameters, n_observed: int, playcount: int,
               cfg: Optional[ProfileTotalConfig] = None) -> Iterator[Tuple[int, float]]:
    """
    Yield (rank, predicted weighted pp) for ranks n_observed+1 .. playcount-1.

    Stops at the first negative prediction and never resumes.
    """
    cfg = cfg or ProfileTotalConfig()
    for n in range(n_observed + 1, playcount):
        predicted = fit.predict(n) * cfg.DECAY ** n
        if predicted < 0:
            logger.debug(f"Tail prediction turned negative at rank {n}")
            return
        yield n, predicted


def extrapolate_tail(fit: FitParameters, n_observed: int, playcount: int,
                     cfg: Optional[ProfileTotalConfig] = None) -> float:
    """Sum the projected weighted pp of plays beyond the observed sample."""
    return sum(predicted for _, predicted in tail_terms(fit, n_observed, playcount, cfg))


def extrapolate_pp(scores: Sequence[float], playcount: int,
                   cfg: Optional[ProfileTotalConfig] = None) -> float:
    """Fit the observed scores and extrapolate; 0 below MIN_SAMPLE_FOR_FIT."""
    return _extrapolate(scores, playcount, cfg or ProfileTotalConfig())[0]


def _extrapolate(scores: Sequence[float], playcount: int,
                 cfg: ProfileTotalConfig) -> Tuple[float, Optional[FitParameters]]:
    if len(scores) < cfg.MIN_SAMPLE_FOR_FIT:
        return 0.0, None
    fit = gauss_newton_reciprocal_fit(scores, cfg)
    return extrapolate_tail(fit, len(scores), playcount, cfg), fit


# =========================
# Profile totals
# =========================
def compute_track_total(scores: Sequence[float], playcount: int,
                        cfg: Optional[ProfileTotalConfig] = None) -> TrackTotal:
    """Weighted sum of one descending score track plus its extrapolated tail."""
    cfg = cfg or ProfileTotalConfig()
    observed = weighted_sum(scores, cfg)
    tail, fit = _extrapolate(scores, playcount, cfg)
    return TrackTotal(observed_weighted_sum=observed, extrapolated_tail=tail, fit=fit)


def compute_profile_total(
    computed_scores: Sequence[float],
    reference_scores: Sequence[float],
    playcount: int,
    reference_grand_total: float,
    cfg: Optional[ProfileTotalConfig] = None,
) -> ProfileTotal:
    """
    Total both tracks and carry the reference-side bonus over to the computed one.

    Args:
        computed_scores: locally computed pp, sorted descending
        reference_scores: externally reported pp, sorted descending
        playcount: reported number of ranked plays (tail upper bound)
        reference_grand_total: authoritative external total

    Returns:
        ProfileTotal with bonus = reference_grand_total - reference.total and
        final_computed_total = computed.total + bonus
    """
    cfg = cfg or ProfileTotalConfig()
    if not math.isfinite(reference_grand_total):
        raise NonFiniteScoreError(f"Reference grand total is not finite: {reference_grand_total}")

    computed = compute_track_total(computed_scores, playcount, cfg)
    reference = compute_track_total(reference_scores, playcount, cfg)

    result = ProfileTotal(
        computed=computed,
        reference=reference,
        reference_grand_total=float(reference_grand_total),
    )
    logger.info(
        f"Computed total {result.final_computed_total:.1f}pp "
        f"(bonus {result.bonus:.1f}pp, tail {computed.extrapolated_tail:.1f}pp)"
    )
    return result
