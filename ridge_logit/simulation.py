from __future__ import annotations

"""
Synthetic data from a known logistic model: Gaussian features, Bernoulli labels.
"""

from dataclasses import dataclass

import numpy as np

from .constants import (
    DEFAULT_MAX_ITER,
    DEFAULT_SOLVER,
    DEFAULT_TOL,
    N_FEATURES,
    N_TEST,
    N_TRAIN,
    RANDOM_STATE,
    SIGNAL,
)
from .errors import InvalidInputError
from .logreg import sigmoid


@dataclass
class SimulationConfig:
    """Sizes, true-coefficient shape and solver settings for one experiment."""

    n_train: int = N_TRAIN
    n_test: int = N_TEST
    n_features: int = N_FEATURES
    n_informative: int | None = None
    signal: float = SIGNAL
    intercept: float = 0.0
    standardize: bool = True
    solver: str = DEFAULT_SOLVER
    lr: float | None = None
    max_iter: int = DEFAULT_MAX_ITER
    tol: float = DEFAULT_TOL
    random_state: int | None = RANDOM_STATE

    @property
    def informative(self) -> int:
        return self.n_features // 2 if self.n_informative is None else self.n_informative

    def validate(self) -> "SimulationConfig":
        for name in ("n_train", "n_test", "n_features"):
            if getattr(self, name) < 1:
                raise InvalidInputError(f"{name} must be >= 1, got {getattr(self, name)}")
        if not 0 <= self.informative <= self.n_features:
            raise InvalidInputError(
                f"n_informative must be between 0 and n_features ({self.n_features}), "
                f"got {self.informative}"
            )
        return self

    def fit_kwargs(self) -> dict:
        return {"solver": self.solver, "lr": self.lr, "max_iter": self.max_iter, "tol": self.tol}


def make_rng(seed=None) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def make_true_coefficients(
    n_features: int, n_informative: int | None = None, signal: float = SIGNAL
) -> np.ndarray:
    """First n_informative weights are +signal, -signal, +signal, ...; the rest are zero."""
    if n_informative is None:
        n_informative = n_features // 2
    beta = np.zeros(n_features)
    signs = np.where(np.arange(n_informative) % 2 == 0, 1.0, -1.0)
    beta[:n_informative] = signal * signs
    return beta


def simulate_logistic(
    n: int, beta: np.ndarray, intercept: float = 0.0, rng=None
) -> tuple[np.ndarray, np.ndarray]:
    """Draw X ~ N(0, I) with n rows and y ~ Bernoulli(sigmoid(intercept + X @ beta))."""
    rng = make_rng(rng)
    beta = np.asarray(beta, dtype=float)
    X = rng.standard_normal((n, beta.shape[0]))
    probs = sigmoid(intercept + X @ beta)
    y = (rng.random(n) < probs).astype(int)
    return X, y
