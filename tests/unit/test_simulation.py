"""Unit tests for synthetic data generation."""

from __future__ import annotations

import numpy as np
import pytest

from ridge_logit.errors import InvalidInputError
from ridge_logit.simulation import (
    SimulationConfig,
    make_rng,
    make_true_coefficients,
    simulate_logistic,
)


class TestTrueCoefficients:
    def test_alternating_signs_then_zeros(self) -> None:
        beta = make_true_coefficients(6, n_informative=3, signal=0.5)
        np.testing.assert_array_equal(beta, [0.5, -0.5, 0.5, 0.0, 0.0, 0.0])

    def test_default_half_informative(self) -> None:
        beta = make_true_coefficients(100)
        assert np.count_nonzero(beta) == 50
        assert np.dot(beta, beta) == pytest.approx(50 * 0.2**2)


class TestSimulateLogistic:
    """Tests for simulate_logistic."""

    def test_shapes_and_labels(self) -> None:
        X, y = simulate_logistic(50, np.ones(4), rng=0)
        assert X.shape == (50, 4)
        assert y.shape == (50,)
        assert set(np.unique(y)) <= {0, 1}

    def test_same_seed_same_sample(self) -> None:
        beta = make_true_coefficients(5)
        X1, y1 = simulate_logistic(30, beta, rng=7)
        X2, y2 = simulate_logistic(30, beta, rng=7)
        np.testing.assert_array_equal(X1, X2)
        np.testing.assert_array_equal(y1, y2)

    def test_symmetric_model_is_balanced(self) -> None:
        _, y = simulate_logistic(20000, make_true_coefficients(10), rng=1)
        assert abs(y.mean() - 0.5) < 0.03

    def test_intercept_shifts_positive_rate(self) -> None:
        _, y = simulate_logistic(20000, make_true_coefficients(10), intercept=2.0, rng=1)
        assert y.mean() > 0.8

    def test_labels_follow_signal(self) -> None:
        """Rows with a large positive score are mostly labelled 1."""
        beta = np.array([3.0])
        X, y = simulate_logistic(5000, beta, rng=2)
        assert y[X[:, 0] > 1.0].mean() > 0.9
        assert y[X[:, 0] < -1.0].mean() < 0.1


class TestSimulationConfig:
    def test_defaults(self) -> None:
        config = SimulationConfig().validate()
        assert (config.n_train, config.n_test, config.n_features) == (400, 5000, 100)
        assert config.informative == 50
        assert config.fit_kwargs()["solver"] == "gd"

    @pytest.mark.parametrize(
        "kwargs",
        [{"n_train": 0}, {"n_features": -1}, {"n_features": 4, "n_informative": 5}],
    )
    def test_rejects_bad_sizes(self, kwargs: dict) -> None:
        with pytest.raises(InvalidInputError):
            SimulationConfig(**kwargs).validate()

    def test_make_rng_passes_generator_through(self) -> None:
        rng = np.random.default_rng(0)
        assert make_rng(rng) is rng
        assert isinstance(make_rng(3), np.random.Generator)
