from __future__ import annotations

"""
Input checks and column scaling for design matrices and binary labels.
"""

import math

import numpy as np

from .errors import InvalidInputError


def validate_design(X, y) -> tuple[np.ndarray, np.ndarray]:
    """
    Return (X, y) as float arrays or raise InvalidInputError.

    Labels must already be 0/1; other codings are rejected, not remapped.
    """
    try:
        X_arr = np.asarray(X, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"X must be numeric: {exc}") from exc
    y_arr = np.asarray(y)

    if X_arr.ndim != 2:
        raise InvalidInputError(f"X must be 2-dimensional, got shape {X_arr.shape}")
    if y_arr.ndim != 1:
        raise InvalidInputError(f"y must be 1-dimensional, got shape {y_arr.shape}")
    if X_arr.shape[0] == 0 or X_arr.shape[1] == 0:
        raise InvalidInputError(f"X must have at least one row and one column, got {X_arr.shape}")
    if X_arr.shape[0] != y_arr.shape[0]:
        raise InvalidInputError(
            f"X has {X_arr.shape[0]} rows but y has {y_arr.shape[0]} labels"
        )
    if not np.all(np.isfinite(X_arr)):
        raise InvalidInputError("X contains NaN or infinite values")

    if y_arr.dtype.kind not in "biuf":
        raise InvalidInputError(f"y must hold numeric 0/1 labels, got dtype {y_arr.dtype}")
    y_float = y_arr.astype(float)
    bad = ~np.isin(y_float, (0.0, 1.0))
    if bad.any():
        offending = sorted({str(v) for v in y_arr[bad][:5]})
        raise InvalidInputError(f"y must contain only 0 and 1, found {offending}")

    return X_arr, y_float


def validate_penalty(lam) -> float:
    """Penalty strength must be a finite, non-negative number."""
    try:
        lam_f = float(lam)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"lam must be a number, got {lam!r}") from exc
    if not math.isfinite(lam_f) or lam_f < 0:
        raise InvalidInputError(f"lam must be finite and >= 0, got {lam_f}")
    return lam_f


def standardize(
    X: np.ndarray, mean: np.ndarray | None = None, std: np.ndarray | None = None
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Center and scale columns. Pass the training mean/std to transform held-out rows.
    """
    X_arr = np.asarray(X, dtype=float)
    if mean is None:
        mean = X_arr.mean(axis=0)
    if std is None:
        std = X_arr.std(axis=0)
        std = np.where(std == 0, 1.0, std)
    return (X_arr - mean) / std, mean, std
