"""Unit tests for figure generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ridge_logit.plots import (
    plot_bias_variance,
    plot_coefficient_path,
    plot_estimates_vs_truth,
    plot_roc_curves,
)


@pytest.fixture
def coef_df() -> pd.DataFrame:
    lambdas = [0.0, 0.01, 0.1, 1.0]
    base = np.array([1.0, -0.5, 0.2])
    rows = [base / (1.0 + 10 * lam) for lam in lambdas]
    return pd.DataFrame(rows, index=pd.Index(lambdas, name="lam"), columns=["x0", "x1", "x2"])


@pytest.fixture
def study_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "bias_sq": [0.1, 0.2, 0.5],
            "variance": [1.0, 0.4, 0.1],
            "mse": [1.1, 0.6, 0.6],
            "test_log_loss": [0.70, 0.60, 0.65],
            "test_log_loss_std": [0.02, 0.01, 0.01],
        },
        index=pd.Index([0.0, 0.1, 1.0], name="lam"),
    )


def _assert_png(path: Path) -> None:
    assert path.exists()
    assert path.suffix == ".png"
    assert path.stat().st_size > 0


class TestPlots:
    """Each plot writes a non-empty PNG and returns its path."""

    def test_coefficient_path(self, coef_df: pd.DataFrame, tmp_path: Path) -> None:
        _assert_png(plot_coefficient_path(coef_df, tmp_path / "path.png"))

    def test_bias_variance(self, study_df: pd.DataFrame, tmp_path: Path) -> None:
        _assert_png(plot_bias_variance(study_df, tmp_path / "nested" / "bv.png"))

    def test_roc_curves(self, tmp_path: Path) -> None:
        y = np.array([0, 1, 0, 1, 1, 0, 1, 0])
        probs = {
            "lambda=0": np.array([0.2, 0.7, 0.4, 0.9, 0.6, 0.3, 0.8, 0.5]),
            "lambda=0.1": np.array([0.3, 0.6, 0.45, 0.8, 0.55, 0.35, 0.7, 0.5]),
        }
        _assert_png(plot_roc_curves(y, probs, tmp_path / "roc.png"))

    def test_estimates_vs_truth(self, tmp_path: Path) -> None:
        beta = np.array([0.2, -0.2, 0.0])
        estimates = {"mle": beta * 1.5, "ridge": beta * 0.7}
        _assert_png(plot_estimates_vs_truth(beta, estimates, tmp_path / "scatter.png"))
