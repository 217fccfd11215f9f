from __future__ import annotations

"""
Experiments comparing maximum-likelihood and ridge-penalized logistic fits: the
shrinkage path over lam, a single held-out comparison, and a repeated-simulation
bias/variance study. Also a scikit-learn reference fit used for cross-checking.
"""

import warnings
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression

from .constants import DEFAULT_LAMBDAS, DEFAULT_MAX_ITER
from .data_prep import standardize, validate_design, validate_penalty
from .errors import InvalidInputError
from .logging_utils import get_logger, json_log
from .logreg import (
    PenalizedFit,
    fit_penalized_logistic,
    gradient,
    mean_deviance,
    objective,
    sigmoid,
)
from .metrics import (
    coefficient_error_summary,
    compute_classification_metrics,
    held_out_log_loss,
)
from .simulation import SimulationConfig, make_true_coefficients, simulate_logistic

log = get_logger(__name__)

STUDY_METRICS = (
    "bias_sq",
    "variance",
    "mse",
    "mean_norm_sq",
    "test_log_loss",
    "test_log_loss_std",
)


def lambda_to_sklearn_C(lam: float, n_samples: int) -> float:
    """
    scikit-learn minimizes C * sum(loss) + 0.5 * ||w||^2. Dividing our objective by
    2 * lam gives sum(loss) / (n * lam) + 0.5 * ||w||^2, so C = 1 / (n * lam).
    """
    lam = validate_penalty(lam)
    if lam == 0.0:
        return float("inf")
    return 1.0 / (n_samples * lam)


def fit_sklearn_reference(
    X, y, lam: float = 0.0, max_iter: int = DEFAULT_MAX_ITER, tol: float = 1e-10
) -> PenalizedFit:
    """Fit the same objective with scikit-learn's lbfgs LogisticRegression."""
    X_arr, y_arr = validate_design(X, y)
    lam = validate_penalty(lam)

    # C = inf switches the penalty off
    model = LogisticRegression(
        C=lambda_to_sklearn_C(lam, X_arr.shape[0]),
        solver="lbfgs",
        max_iter=max_iter,
        tol=tol,
    )

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        model.fit(X_arr, y_arr.astype(int))
    converged = not any(issubclass(w.category, ConvergenceWarning) for w in caught)

    intercept = float(model.intercept_[0])
    coef = model.coef_[0]
    grad_intercept, grad_coef = gradient(intercept, coef, X_arr, y_arr, lam)
    return PenalizedFit(
        intercept=intercept,
        coef=coef,
        lam=lam,
        converged=converged,
        n_iter=int(np.max(model.n_iter_)),
        objective=objective(intercept, coef, X_arr, y_arr, lam),
        grad_norm=float(np.sqrt(grad_intercept**2 + np.dot(grad_coef, grad_coef))),
        solver="sklearn-lbfgs",
        message="converged" if converged else "lbfgs hit max_iter",
    )


def coefficient_path(
    X,
    y,
    lambdas: Sequence[float],
    feature_names: list[str] | None = None,
    **fit_kwargs,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Fit once per lam (ascending). Returns a per-lam summary and a lam x feature
    coefficient table.
    """
    X_arr, y_arr = validate_design(X, y)
    if feature_names is None:
        feature_names = [f"x{j}" for j in range(X_arr.shape[1])]

    rows, coefs = [], {}
    for lam in sorted(validate_penalty(lam) for lam in lambdas):
        fit = fit_penalized_logistic(X_arr, y_arr, lam=lam, **fit_kwargs)
        rows.append(
            {
                "lam": lam,
                "intercept": fit.intercept,
                "coef_norm_sq": fit.coef_norm_sq,
                "coef_norm": fit.coef_norm,
                "objective": fit.objective,
                "mean_deviance": mean_deviance(fit.intercept, fit.coef, X_arr, y_arr),
                "converged": fit.converged,
                "n_iter": fit.n_iter,
            }
        )
        coefs[lam] = fit.coef

    summary = pd.DataFrame(rows).set_index("lam")
    coef_df = pd.DataFrame.from_dict(coefs, orient="index", columns=feature_names)
    coef_df.index.name = "lam"
    return summary, coef_df


def _standardized_pair(X_train, X_test, enabled: bool):
    if not enabled:
        return X_train, X_test
    X_train_s, mean, std = standardize(X_train)
    X_test_s, _, _ = standardize(X_test, mean, std)
    return X_train_s, X_test_s


@dataclass
class ComparisonResult:
    """Per-lam summary plus what the plots need (held-out labels and probabilities)."""

    summary: pd.DataFrame
    beta_true: np.ndarray
    y_test: np.ndarray
    fits: dict[float, PenalizedFit] = field(default_factory=dict)
    test_probs: dict[float, np.ndarray] = field(default_factory=dict)


def held_out_comparison(
    config: SimulationConfig | None = None, lambdas: Sequence[float] = DEFAULT_LAMBDAS
) -> ComparisonResult:
    """Simulate one training and one test sample, fit each lam, score on the test sample."""
    config = (config or SimulationConfig()).validate()
    rng = np.random.default_rng(config.random_state)
    beta_true = make_true_coefficients(config.n_features, config.informative, config.signal)

    X_train, y_train = simulate_logistic(config.n_train, beta_true, config.intercept, rng)
    X_test, y_test = simulate_logistic(config.n_test, beta_true, config.intercept, rng)
    X_train, X_test = _standardized_pair(X_train, X_test, config.standardize)

    result = ComparisonResult(summary=pd.DataFrame(), beta_true=beta_true, y_test=y_test)
    rows = []
    for lam in lambdas:
        fit = fit_penalized_logistic(X_train, y_train, lam=lam, **config.fit_kwargs())
        row = {
            "lam": fit.lam,
            "converged": fit.converged,
            "n_iter": fit.n_iter,
            "intercept": fit.intercept,
            "coef_norm": fit.coef_norm,
            "coef_norm_sq": fit.coef_norm_sq,
            "coef_mse": float(np.sum((fit.coef - beta_true) ** 2)),
            "train_deviance": mean_deviance(fit.intercept, fit.coef, X_train, y_train),
            "test_log_loss": float("nan"),
            "test_roc_auc": float("nan"),
            "test_accuracy": float("nan"),
        }
        if fit.converged:
            probs = sigmoid(fit.intercept + X_test @ fit.coef)
            scores = compute_classification_metrics(y_test, probs)
            row["test_log_loss"] = scores["log_loss"]
            row["test_roc_auc"] = scores["roc_auc"]
            row["test_accuracy"] = scores["accuracy"]
            result.test_probs[fit.lam] = probs
        else:
            log.warning(
                json_log(
                    "comparison.fit_failed",
                    component="experiments",
                    lam=fit.lam,
                    reason=fit.message,
                )
            )
        result.fits[fit.lam] = fit
        rows.append(row)

    result.summary = pd.DataFrame(rows).set_index("lam")
    return result


def bias_variance_study(
    config: SimulationConfig | None = None,
    lambdas: Sequence[float] = DEFAULT_LAMBDAS,
    n_reps: int = 50,
) -> pd.DataFrame:
    """
    Repeat the simulation n_reps times with fresh training samples and one shared
    test sample, then decompose the coefficient error per lam. Fits that do not
    converge are left out and counted in n_failed.
    """
    config = (config or SimulationConfig()).validate()
    if n_reps < 1:
        raise InvalidInputError(f"n_reps must be >= 1, got {n_reps}")
    lambdas = [validate_penalty(lam) for lam in lambdas]

    seeds = np.random.SeedSequence(config.random_state).spawn(n_reps + 1)
    beta_true = make_true_coefficients(config.n_features, config.informative, config.signal)
    X_test_raw, y_test = simulate_logistic(
        config.n_test, beta_true, config.intercept, np.random.default_rng(seeds[0])
    )

    estimates: dict[float, list[np.ndarray]] = {lam: [] for lam in lambdas}
    losses: dict[float, list[float]] = {lam: [] for lam in lambdas}
    failed = {lam: 0 for lam in lambdas}

    log.info(
        json_log(
            "study.start",
            component="experiments",
            n_reps=n_reps,
            lambdas=lambdas,
            n_train=config.n_train,
            n_features=config.n_features,
        )
    )
    for rep, seed in enumerate(seeds[1:], start=1):
        X_train, y_train = simulate_logistic(
            config.n_train, beta_true, config.intercept, np.random.default_rng(seed)
        )
        X_train, X_test = _standardized_pair(X_train, X_test_raw, config.standardize)
        for lam in lambdas:
            fit = fit_penalized_logistic(X_train, y_train, lam=lam, **config.fit_kwargs())
            if not fit.converged:
                failed[lam] += 1
                continue
            estimates[lam].append(fit.coef)
            probs = sigmoid(fit.intercept + X_test @ fit.coef)
            losses[lam].append(held_out_log_loss(y_test, probs))
        log.debug(json_log("study.rep_done", component="experiments", rep=rep))

    rows = []
    for lam in lambdas:
        row = {"lam": lam, "n_fits": len(estimates[lam]), "n_failed": failed[lam]}
        if estimates[lam]:
            row.update(coefficient_error_summary(np.vstack(estimates[lam]), beta_true))
            row["test_log_loss"] = float(np.mean(losses[lam]))
            row["test_log_loss_std"] = float(np.std(losses[lam]))
        else:
            row.update({key: float("nan") for key in STUDY_METRICS})
        rows.append(row)
        log.info(json_log("study.lambda_done", component="experiments", **row))

    return pd.DataFrame(rows).set_index("lam")
