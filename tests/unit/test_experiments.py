"""Unit tests for the shrinkage experiments."""

from __future__ import annotations

import math

import numpy as np
import pytest

from ridge_logit.errors import InvalidInputError
from ridge_logit.experiments import (
    bias_variance_study,
    coefficient_path,
    fit_sklearn_reference,
    held_out_comparison,
    lambda_to_sklearn_C,
)
from ridge_logit.simulation import SimulationConfig, make_true_coefficients, simulate_logistic


@pytest.fixture
def small_config() -> SimulationConfig:
    """Small, fast configuration; newton keeps lam = 0 fits quick."""
    return SimulationConfig(
        n_train=200, n_test=1000, n_features=10, solver="newton", random_state=5
    )


class TestLambdaToC:
    def test_conversion(self) -> None:
        assert lambda_to_sklearn_C(0.1, 400) == pytest.approx(0.025)

    def test_zero_means_no_penalty(self) -> None:
        assert math.isinf(lambda_to_sklearn_C(0.0, 400))

    def test_negative_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            lambda_to_sklearn_C(-1.0, 10)


def test_sklearn_reference_reports_objective() -> None:
    X, y = simulate_logistic(300, make_true_coefficients(4, signal=1.0), rng=0)
    fit = fit_sklearn_reference(X, y, lam=0.05)

    assert fit.solver == "sklearn-lbfgs"
    assert fit.lam == 0.05
    assert fit.coef.shape == (4,)
    assert fit.grad_norm < 1e-4


class TestCoefficientPath:
    """Tests for coefficient_path."""

    def test_sorted_and_shrinking(self) -> None:
        X, y = simulate_logistic(300, make_true_coefficients(6, signal=0.5), rng=1)
        summary, coef_df = coefficient_path(
            X, y, [1.0, 0.0, 0.1, 0.01], solver="newton", tol=1e-10
        )

        assert list(summary.index) == [0.0, 0.01, 0.1, 1.0]
        assert coef_df.shape == (4, 6)
        assert list(coef_df.columns) == [f"x{j}" for j in range(6)]
        assert summary["converged"].all()
        assert summary["coef_norm_sq"].is_monotonic_decreasing
        assert (summary["objective"] >= summary["mean_deviance"] - 1e-12).all()

    def test_custom_feature_names(self) -> None:
        X, y = simulate_logistic(100, np.array([1.0, -1.0]), rng=2)
        _, coef_df = coefficient_path(X, y, [0.1], feature_names=["age", "dose"])
        assert list(coef_df.columns) == ["age", "dose"]


class TestHeldOutComparison:
    """Tests for held_out_comparison."""

    def test_summary_and_probabilities(self, small_config: SimulationConfig) -> None:
        result = held_out_comparison(small_config, lambdas=(0.0, 0.1))

        assert list(result.summary.index) == [0.0, 0.1]
        assert result.summary["converged"].all()
        assert set(result.test_probs) == {0.0, 0.1}
        for probs in result.test_probs.values():
            assert probs.shape == (1000,)
            assert np.all((probs > 0) & (probs < 1))
        assert result.beta_true.shape == (10,)
        assert result.summary.loc[0.1, "coef_norm"] < result.summary.loc[0.0, "coef_norm"]

    def test_failed_fit_has_no_scores(self, small_config: SimulationConfig) -> None:
        small_config.solver = "gd"
        small_config.max_iter = 1
        result = held_out_comparison(small_config, lambdas=(0.1,))

        assert not result.summary.loc[0.1, "converged"]
        assert math.isnan(result.summary.loc[0.1, "test_log_loss"])
        assert result.test_probs == {}


class TestBiasVarianceStudy:
    """Tests for bias_variance_study."""

    def test_columns_and_decomposition(self, small_config: SimulationConfig) -> None:
        study = bias_variance_study(small_config, lambdas=[0.0, 1.0], n_reps=5)

        assert list(study.index) == [0.0, 1.0]
        for column in ("bias_sq", "variance", "mse", "test_log_loss", "n_fits", "n_failed"):
            assert column in study.columns
        assert ((study["n_fits"] + study["n_failed"]) == 5).all()
        np.testing.assert_allclose(study["mse"], study["bias_sq"] + study["variance"])
        assert study.loc[1.0, "variance"] < study.loc[0.0, "variance"]

    def test_reproducible(self, small_config: SimulationConfig) -> None:
        first = bias_variance_study(small_config, lambdas=[0.1], n_reps=3)
        second = bias_variance_study(small_config, lambdas=[0.1], n_reps=3)
        assert first.loc[0.1, "mse"] == second.loc[0.1, "mse"]

    def test_all_failed_gives_nan(self, small_config: SimulationConfig) -> None:
        small_config.solver = "gd"
        small_config.max_iter = 1
        study = bias_variance_study(small_config, lambdas=[0.1], n_reps=2)

        assert study.loc[0.1, "n_failed"] == 2
        assert study.loc[0.1, "n_fits"] == 0
        assert math.isnan(study.loc[0.1, "mse"])

    def test_rejects_zero_reps(self, small_config: SimulationConfig) -> None:
        with pytest.raises(InvalidInputError, match="n_reps"):
            bias_variance_study(small_config, n_reps=0)
