"""Unit tests for input validation and scaling."""

from __future__ import annotations

import numpy as np
import pytest

from ridge_logit.data_prep import (
    standardize,
    validate_design,
    validate_penalty,
)
from ridge_logit.errors import InvalidInputError


class TestValidateDesign:
    """Tests for validate_design."""

    def test_returns_float_arrays(self) -> None:
        X, y = validate_design([[1, 2], [3, 4]], [0, 1])
        assert X.dtype == float
        assert y.dtype == float
        np.testing.assert_array_equal(y, [0.0, 1.0])

    def test_accepts_float_and_bool_labels(self) -> None:
        _, y_float = validate_design(np.ones((3, 1)), np.array([0.0, 1.0, 1.0]))
        _, y_bool = validate_design(np.ones((3, 1)), np.array([False, True, True]))
        np.testing.assert_array_equal(y_float, y_bool)

    def test_rejects_minus_one_plus_one_coding(self) -> None:
        """Labels are never silently remapped."""
        with pytest.raises(InvalidInputError, match="only 0 and 1"):
            validate_design(np.ones((2, 1)), np.array([-1, 1]))

    def test_rejects_empty_design(self) -> None:
        with pytest.raises(InvalidInputError, match="at least one"):
            validate_design(np.empty((0, 3)), np.empty(0))

    def test_rejects_non_numeric_features(self) -> None:
        with pytest.raises(InvalidInputError, match="numeric"):
            validate_design([["a", "b"]], [1])

    def test_rejects_two_dimensional_labels(self) -> None:
        with pytest.raises(InvalidInputError, match="1-dimensional"):
            validate_design(np.ones((2, 1)), np.array([[0], [1]]))


class TestValidatePenalty:
    def test_accepts_zero_and_positive(self) -> None:
        assert validate_penalty(0) == 0.0
        assert validate_penalty("0.5") == 0.5

    @pytest.mark.parametrize("lam", [-1e-12, float("nan"), None, "abc"])
    def test_rejects_bad_values(self, lam) -> None:
        with pytest.raises(InvalidInputError):
            validate_penalty(lam)


class TestStandardize:
    """Tests for standardize."""

    def test_columns_have_zero_mean_unit_variance(self) -> None:
        rng = np.random.default_rng(3)
        X = rng.normal(loc=5.0, scale=3.0, size=(200, 4))
        X_scaled, mean, std = standardize(X)

        np.testing.assert_allclose(X_scaled.mean(axis=0), 0.0, atol=1e-12)
        np.testing.assert_allclose(X_scaled.std(axis=0), 1.0)
        assert mean.shape == (4,)
        assert std.shape == (4,)

    def test_constant_column_kept_finite(self) -> None:
        X = np.array([[1.0, 7.0], [2.0, 7.0], [3.0, 7.0]])
        X_scaled, _, std = standardize(X)

        assert std[1] == 1.0
        np.testing.assert_array_equal(X_scaled[:, 1], 0.0)

    def test_reuses_training_statistics(self) -> None:
        X_train = np.array([[0.0], [2.0], [4.0]])
        _, mean, std = standardize(X_train)
        X_test, _, _ = standardize(np.array([[2.0], [6.0]]), mean, std)

        np.testing.assert_allclose(X_test[:, 0], [0.0, 4.0 / std[0]])
