from __future__ import annotations

"""
Metric helpers: held-out classification summaries and coefficient error decomposition.
"""

import numpy as np
import pandas as pd
from sklearn import metrics

from .errors import InvalidInputError


def held_out_log_loss(y_true, probs: np.ndarray) -> float:
    """Mean negative log-likelihood of the labels under the predicted probabilities."""
    return float(metrics.log_loss(y_true, probs, labels=[0, 1]))


def compute_classification_metrics(y_true, probs: np.ndarray, threshold: float = 0.5):
    """Compute standard binary metrics given probabilities and a threshold."""
    preds = (probs >= threshold).astype(int)
    precision, recall, f1, _ = metrics.precision_recall_fscore_support(
        y_true, preds, average="binary", zero_division=0
    )
    try:
        roc_auc = metrics.roc_auc_score(y_true, probs)
    except ValueError:
        roc_auc = float("nan")

    return {
        "accuracy": metrics.accuracy_score(y_true, preds),
        "precision": precision,
        "recall": recall,
        "f1": f1,
        "roc_auc": roc_auc,
        "log_loss": held_out_log_loss(y_true, probs),
        "confusion_matrix": metrics.confusion_matrix(y_true, preds, labels=[0, 1]),
    }


def coefficient_error_summary(estimates: np.ndarray, beta_true: np.ndarray) -> dict[str, float]:
    """
    Decompose the squared error of repeated estimates around the true weights.

    estimates has one row per repetition. mse == bias_sq + variance up to rounding.
    """
    estimates = np.atleast_2d(np.asarray(estimates, dtype=float))
    beta_true = np.asarray(beta_true, dtype=float)
    if estimates.shape[1] != beta_true.shape[0]:
        raise InvalidInputError(
            f"estimates have {estimates.shape[1]} columns but beta_true has {beta_true.shape[0]}"
        )

    mean_estimate = estimates.mean(axis=0)
    bias_sq = float(np.sum((mean_estimate - beta_true) ** 2))
    variance = float(np.mean(np.sum((estimates - mean_estimate) ** 2, axis=1)))
    mse = float(np.mean(np.sum((estimates - beta_true) ** 2, axis=1)))
    return {
        "bias_sq": bias_sq,
        "variance": variance,
        "mse": mse,
        "mean_norm_sq": float(np.mean(np.sum(estimates**2, axis=1))),
    }


def summarize_coefficients(
    coef: np.ndarray, feature_names: list[str], top_k: int = 8
) -> dict[str, pd.Series]:
    coef_series = pd.Series(coef, index=feature_names)
    coef_sorted = coef_series.sort_values()
    return {
        "positive": coef_sorted.tail(top_k)[::-1],
        "negative": coef_sorted.head(top_k),
    }
