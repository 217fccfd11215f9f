from __future__ import annotations

"""
Figures for the shrinkage experiments. Uses the Agg backend so it runs headless.
"""

from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import auc, roc_curve

from .logging_utils import get_logger, json_log

log = get_logger(__name__)

FIGURE_DPI = 150


def _save_figure(fig: plt.Figure, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=FIGURE_DPI, facecolor="white")
    plt.close(fig)
    log.info(json_log("plots.saved", component="plots", path=str(path)))
    return path


def _lambda_axis(ax, lambdas) -> None:
    """Log-like axis that still shows lam = 0."""
    positive = [lam for lam in lambdas if lam > 0]
    if positive:
        ax.set_xscale("symlog", linthresh=min(positive))
    ax.set_xlabel("lambda")


def plot_coefficient_path(coef_df: pd.DataFrame, output_path: Path, max_lines: int = 30) -> Path:
    """One trace per feature (up to max_lines, largest first) as lam grows."""
    fig, ax = plt.subplots(figsize=(8, 6))
    lambdas = coef_df.index.to_numpy(dtype=float)
    order = coef_df.abs().max(axis=0).sort_values(ascending=False).index[:max_lines]
    for name in order:
        ax.plot(lambdas, coef_df[name].to_numpy(), lw=1, alpha=0.8)
    ax.axhline(0.0, color="black", lw=0.8)
    _lambda_axis(ax, lambdas)
    ax.set_ylabel("coefficient")
    ax.set_title("Ridge shrinkage path")
    ax.grid(True, alpha=0.3)
    return _save_figure(fig, output_path)


def plot_bias_variance(study_df: pd.DataFrame, output_path: Path) -> Path:
    """Squared bias, variance and MSE of the coefficients, plus held-out log-loss."""
    fig, (ax_err, ax_loss) = plt.subplots(1, 2, figsize=(12, 5))
    lambdas = study_df.index.to_numpy(dtype=float)

    ax_err.plot(lambdas, study_df["bias_sq"], marker="o", label="bias^2")
    ax_err.plot(lambdas, study_df["variance"], marker="o", label="variance")
    ax_err.plot(lambdas, study_df["mse"], marker="o", lw=2, label="MSE")
    _lambda_axis(ax_err, lambdas)
    ax_err.set_ylabel("squared error of coefficients")
    ax_err.set_title("Bias-variance decomposition")
    ax_err.legend()
    ax_err.grid(True, alpha=0.3)

    ax_loss.errorbar(
        lambdas,
        study_df["test_log_loss"],
        yerr=study_df.get("test_log_loss_std"),
        marker="o",
        capsize=3,
        color="darkorange",
    )
    _lambda_axis(ax_loss, lambdas)
    ax_loss.set_ylabel("held-out log-loss")
    ax_loss.set_title("Predictive performance")
    ax_loss.grid(True, alpha=0.3)
    return _save_figure(fig, output_path)


def plot_roc_curves(
    y_true: np.ndarray, probs_by_label: Mapping[str, np.ndarray], output_path: Path
) -> Path:
    fig, ax = plt.subplots(figsize=(8, 6))
    for label, probs in probs_by_label.items():
        fpr, tpr, _ = roc_curve(y_true, probs)
        roc_auc = auc(fpr, tpr)
        ax.plot(fpr, tpr, lw=2, label=f"{label} (AUC = {roc_auc:.3f})")

    ax.plot([0, 1], [0, 1], color="navy", lw=2, linestyle="--")
    ax.set_xlim([0.0, 1.0])
    ax.set_ylim([0.0, 1.05])
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title("ROC curves on held-out sample")
    ax.legend(loc="lower right")
    ax.grid(True)
    return _save_figure(fig, output_path)


def plot_estimates_vs_truth(
    beta_true: np.ndarray, estimates: Mapping[str, np.ndarray], output_path: Path
) -> Path:
    """Scatter each estimate against the true weights; points on y = x are unbiased."""
    fig, ax = plt.subplots(figsize=(7, 7))
    for label, coef in estimates.items():
        ax.scatter(beta_true, coef, s=12, alpha=0.6, label=label)

    values = np.concatenate([np.ravel(beta_true), *[np.ravel(c) for c in estimates.values()]])
    lo, hi = float(values.min()), float(values.max())
    ax.plot([lo, hi], [lo, hi], color="black", lw=1, linestyle="--")
    ax.set_xlabel("true coefficient")
    ax.set_ylabel("estimated coefficient")
    ax.set_title("Estimates vs. truth")
    ax.legend()
    ax.grid(True, alpha=0.3)
    return _save_figure(fig, output_path)
