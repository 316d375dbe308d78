"""
Unit tests for the profile total engine

Covers:
- Rank decay weights
- Weighted aggregation
- Gauss-Newton reciprocal fit
- Tail extrapolation bounds and early exit
- Bonus / residual wiring between the two tracks
"""
import math

import numpy as np
import pytest

from src.totals.profile_total import (
    DegenerateFitError,
    FitParameters,
    NonFiniteScoreError,
    ProfileTotalConfig,
    compute_profile_total,
    compute_track_total,
    extrapolate_pp,
    extrapolate_tail,
    gauss_newton_reciprocal_fit,
    rank_weight,
    tail_terms,
    weighted_sum,
)


def _reciprocal_scores(b0, b1, n):
    return [b0 + b1 / k for k in range(1, n + 1)]


class TestRankWeighting:
    """Test rank decay weights"""

    def test_top_play_weighs_one(self):
        assert rank_weight(0) == 1.0

    def test_each_rank_decays_by_factor(self):
        for rank in range(1, 200):
            assert rank_weight(rank) == pytest.approx(0.95 * rank_weight(rank - 1), rel=1e-12)

    def test_decay_is_configurable(self):
        cfg = ProfileTotalConfig(DECAY=0.5)
        assert rank_weight(3, cfg) == 0.125


class TestWeightedSum:
    """Test weighted aggregation of ordered scores"""

    @pytest.mark.parametrize("n", [0, 1, 5, 150])
    def test_zeros_sum_to_zero(self, n):
        assert weighted_sum([0.0] * n) == 0.0

    def test_single_score_is_returned_exactly(self):
        assert weighted_sum([123.456]) == 123.456

    def test_three_scores(self):
        assert weighted_sum([100, 90, 80]) == pytest.approx(257.7)

    def test_order_matters(self):
        assert weighted_sum([100, 80]) != weighted_sum([80, 100])

    def test_rejects_nan(self):
        with pytest.raises(NonFiniteScoreError):
            weighted_sum([100.0, float("nan")])

    def test_rejects_inf(self):
        with pytest.raises(NonFiniteScoreError):
            weighted_sum([math.inf])


class TestReciprocalFit:
    """Test the Gauss-Newton reciprocal fit"""

    def test_recovers_exact_parameters(self):
        fit = gauss_newton_reciprocal_fit(_reciprocal_scores(5, 10, 150))

        assert fit.b0 == pytest.approx(5, abs=1e-6)
        assert fit.b1 == pytest.approx(10, abs=1e-6)

    def test_recovers_parameters_with_single_iteration(self):
        """Model is linear in (b0, b1) so one step lands on the solution"""
        cfg = ProfileTotalConfig(FIT_ITERATIONS=1)
        fit = gauss_newton_reciprocal_fit(_reciprocal_scores(40, 250, 100), cfg)

        assert fit.b0 == pytest.approx(40, abs=1e-6)
        assert fit.b1 == pytest.approx(250, abs=1e-6)

    def test_zero_iterations_returns_initial_guess(self):
        cfg = ProfileTotalConfig(FIT_ITERATIONS=0)
        fit = gauss_newton_reciprocal_fit([300.0, 250.0, 200.0], cfg)

        assert fit == FitParameters(b0=300.0, b1=1.0)

    def test_matches_least_squares(self):
        rng = np.random.RandomState(42)
        scores = sorted(
            (200 + 150 / k + rng.normal(0, 3) for k in range(1, 121)),
            reverse=True,
        )
        fit = gauss_newton_reciprocal_fit(scores)

        n = np.arange(1, len(scores) + 1)
        design = np.column_stack([np.ones(len(scores)), 1.0 / n])
        expected, *_ = np.linalg.lstsq(design, np.asarray(scores), rcond=None)

        assert fit.b0 == pytest.approx(expected[0], rel=1e-9)
        assert fit.b1 == pytest.approx(expected[1], rel=1e-9)

    @pytest.mark.parametrize("scores", [[], [250.0]])
    def test_too_few_scores_is_degenerate(self, scores):
        with pytest.raises(DegenerateFitError):
            gauss_newton_reciprocal_fit(scores)

    def test_rejects_non_finite_scores(self):
        with pytest.raises(NonFiniteScoreError):
            gauss_newton_reciprocal_fit([300.0, float("inf"), 100.0])


class TestTailExtrapolation:
    """Test tail extrapolation beyond the observed sample"""

    def test_below_minimum_sample_is_zero(self):
        scores = _reciprocal_scores(100, 50, 99)
        assert extrapolate_pp(scores, playcount=10_000) == 0.0

    def test_minimum_sample_is_configurable(self):
        cfg = ProfileTotalConfig(MIN_SAMPLE_FOR_FIT=5)
        scores = _reciprocal_scores(100, 50, 5)

        assert extrapolate_pp(scores, playcount=50, cfg=cfg) > 0

    def test_playcount_bounds_candidate_ranks(self):
        fit = FitParameters(b0=100.0, b1=0.0)

        assert list(tail_terms(fit, 100, 101)) == []

        terms = list(tail_terms(fit, 100, 102))
        assert [rank for rank, _ in terms] == [101]
        assert terms[0][1] == pytest.approx(100.0 * 0.95 ** 101)

    def test_playcount_below_sample_adds_nothing(self):
        fit = FitParameters(b0=100.0, b1=0.0)
        assert extrapolate_tail(fit, 100, 50) == 0.0

    def test_constant_model_terms_strictly_decrease(self):
        fit = FitParameters(b0=80.0, b1=0.0)
        values = [value for _, value in tail_terms(fit, 100, 160)]

        assert len(values) == 59
        assert all(a > b for a, b in zip(values, values[1:]))
        assert values[1] / values[0] == pytest.approx(0.95)

    def test_stops_at_first_negative_prediction(self):
        # b0 + b1/n < 0 once n > 200
        fit = FitParameters(b0=-1.0, b1=200.0)
        ranks = [rank for rank, _ in tail_terms(fit, 100, 1_000_000)]

        assert ranks[0] == 101
        assert ranks[-1] == 200

    def test_does_not_resume_after_negative(self):
        fit = FitParameters(b0=-5.0, b1=10.0)
        assert list(tail_terms(fit, 100, 10_000)) == []

    def test_tail_sum_matches_terms(self):
        fit = FitParameters(b0=20.0, b1=500.0)
        expected = sum((20.0 + 500.0 / n) * 0.95 ** n for n in range(101, 400))

        assert extrapolate_tail(fit, 100, 400) == pytest.approx(expected)


class TestProfileTotal:
    """Test track totals and the bonus residual"""

    def test_bonus_wiring_without_fit(self):
        result = compute_profile_total(
            computed_scores=[100, 90, 80],
            reference_scores=[100, 90, 80],
            playcount=5000,
            reference_grand_total=300,
        )

        assert result.reference.total == pytest.approx(257.7)
        assert result.reference.extrapolated_tail == 0.0
        assert result.bonus == pytest.approx(42.3)
        assert result.final_computed_total == pytest.approx(300)

    def test_bonus_carries_over_to_computed_track(self):
        result = compute_profile_total(
            computed_scores=[120, 90],
            reference_scores=[100, 90],
            playcount=10,
            reference_grand_total=250,
        )

        computed = 120 + 0.95 * 90
        reference = 100 + 0.95 * 90
        assert result.bonus == pytest.approx(250 - reference)
        assert result.final_computed_total == pytest.approx(computed + 250 - reference)

    def test_track_total_includes_tail(self):
        scores = _reciprocal_scores(50, 300, 100)
        track = compute_track_total(scores, playcount=2000)

        assert track.fit is not None
        assert track.fit.b0 == pytest.approx(50, abs=1e-6)
        assert track.extrapolated_tail > 0
        assert track.total == pytest.approx(track.observed_weighted_sum + track.extrapolated_tail)

    def test_small_track_has_no_fit(self):
        track = compute_track_total([300, 200], playcount=2000)
        assert track.fit is None

    def test_rejects_non_finite_reference_total(self):
        with pytest.raises(NonFiniteScoreError):
            compute_profile_total([1.0], [1.0], 10, float("nan"))


class TestConfig:
    """Test engine configuration"""

    def test_defaults(self):
        cfg = ProfileTotalConfig()
        assert cfg.DECAY == 0.95
        assert cfg.MIN_SAMPLE_FOR_FIT == 100
        assert cfg.FIT_ITERATIONS == 1000

    def test_from_settings_mapping(self):
        cfg = ProfileTotalConfig.from_settings(
            {'decay': 0.9, 'min_sample_for_fit': 10, 'fit_iterations': 5}
        )
        assert cfg == ProfileTotalConfig(DECAY=0.9, MIN_SAMPLE_FOR_FIT=10, FIT_ITERATIONS=5)
