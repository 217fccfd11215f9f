from __future__ import annotations

"""
Ridge-penalized logistic regression.

The fitted objective is the mean deviance plus an L2 penalty on the feature weights:

    L(b0, w) = (2/n) * sum(log(1 + exp(z)) - y * z) + lam * ||w||^2,    z = b0 + X @ w

The intercept is never penalized, so lam only enters the weight gradient (2 * lam * w).
Internally the parameters are a single vector theta = [b0, w] and X carries a leading
column of ones, the same layout as the plain gradient-descent model this grew out of.
"""

from dataclasses import dataclass

import numpy as np

from .constants import DEFAULT_MAX_ITER, DEFAULT_SOLVER, DEFAULT_TOL, SIGMOID_CLIP, SOLVERS
from .data_prep import standardize, validate_design, validate_penalty
from .errors import FitFailedError, InvalidInputError
from .logging_utils import get_logger, json_log

log = get_logger(__name__)

ARMIJO_C = 1e-4
MAX_HALVINGS = 60


def sigmoid(z):
    z = np.clip(z, -SIGMOID_CLIP, SIGMOID_CLIP)
    return 1.0 / (1.0 + np.exp(-z))


def _add_bias(X: np.ndarray) -> np.ndarray:
    return np.hstack([np.ones((X.shape[0], 1)), X])


def _penalty_mask(n_params: int) -> np.ndarray:
    mask = np.ones(n_params)
    mask[0] = 0.0
    return mask


def _objective_theta(theta: np.ndarray, X_bias: np.ndarray, y: np.ndarray, lam: float) -> float:
    z = X_bias @ theta
    data_term = 2.0 * np.mean(np.logaddexp(0.0, z) - y * z)
    return float(data_term + lam * np.dot(theta[1:], theta[1:]))


def _gradient_theta(
    theta: np.ndarray, X_bias: np.ndarray, y: np.ndarray, lam: float
) -> np.ndarray:
    residual = sigmoid(X_bias @ theta) - y
    grad = 2.0 * (X_bias.T @ residual) / len(y)
    grad[1:] += 2.0 * lam * theta[1:]
    return grad


def _hessian_theta(theta: np.ndarray, X_bias: np.ndarray, lam: float) -> np.ndarray:
    prob = sigmoid(X_bias @ theta)
    weights = prob * (1.0 - prob)
    H = 2.0 * (X_bias.T * weights) @ X_bias / X_bias.shape[0]
    H += np.diag(2.0 * lam * _penalty_mask(len(theta)))
    return H


def mean_deviance(intercept: float, coef, X, y) -> float:
    """Data term of the objective, -(2/n) * log-likelihood. Independent of lam."""
    X_arr = np.asarray(X, dtype=float)
    theta = np.r_[intercept, np.asarray(coef, dtype=float)]
    return _objective_theta(theta, _add_bias(X_arr), np.asarray(y, dtype=float), 0.0)


def objective(intercept: float, coef, X, y, lam: float) -> float:
    """Mean deviance plus lam * sum(coef**2)."""
    X_arr = np.asarray(X, dtype=float)
    theta = np.r_[intercept, np.asarray(coef, dtype=float)]
    return _objective_theta(theta, _add_bias(X_arr), np.asarray(y, dtype=float), lam)


def gradient(intercept: float, coef, X, y, lam: float) -> tuple[float, np.ndarray]:
    """Return (dL/db0, dL/dw). Only the weight part carries the 2 * lam * w term."""
    X_arr = np.asarray(X, dtype=float)
    theta = np.r_[intercept, np.asarray(coef, dtype=float)]
    grad = _gradient_theta(theta, _add_bias(X_arr), np.asarray(y, dtype=float), lam)
    return float(grad[0]), grad[1:]


def hessian(intercept: float, coef, X, lam: float) -> np.ndarray:
    """(p+1) x (p+1) Hessian, intercept first."""
    X_arr = np.asarray(X, dtype=float)
    theta = np.r_[intercept, np.asarray(coef, dtype=float)]
    return _hessian_theta(theta, _add_bias(X_arr), lam)


def lipschitz_step(X, lam: float) -> float:
    """
    1 / Lipschitz constant of the gradient. The Hessian is bounded by
    (1 / 2n) * X_bias^T X_bias + 2 * lam, so this step never increases the objective.
    """
    X_bias = _add_bias(np.asarray(X, dtype=float))
    sigma_max = np.linalg.norm(X_bias, 2)
    return 1.0 / (0.5 * sigma_max**2 / X_bias.shape[0] + 2.0 * lam)


@dataclass(frozen=True)
class PenalizedFit:
    """Result of one fit. The weight array is read-only."""

    intercept: float
    coef: np.ndarray
    lam: float
    converged: bool
    n_iter: int
    objective: float
    grad_norm: float
    solver: str
    message: str = ""

    def __post_init__(self):
        coef = np.array(self.coef, dtype=float)
        coef.setflags(write=False)
        object.__setattr__(self, "coef", coef)
        object.__setattr__(self, "intercept", float(self.intercept))

    @property
    def coef_norm_sq(self) -> float:
        return float(np.dot(self.coef, self.coef))

    @property
    def coef_norm(self) -> float:
        return float(np.linalg.norm(self.coef))


def _check_solver_settings(solver: str, lr, max_iter, tol):
    if solver not in SOLVERS:
        raise InvalidInputError(f"Unknown solver: {solver!r} (expected one of {SOLVERS})")
    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)) or max_iter < 1:
        raise InvalidInputError(f"max_iter must be a positive integer, got {max_iter!r}")
    if not np.isfinite(tol) or tol <= 0:
        raise InvalidInputError(f"tol must be finite and > 0, got {tol!r}")
    if lr is not None and (not np.isfinite(lr) or lr <= 0):
        raise InvalidInputError(f"lr must be finite and > 0, got {lr!r}")


def _gradient_descent(theta, X_bias, y, lam, lr, max_iter, tol):
    grad = _gradient_theta(theta, X_bias, y, lam)
    grad_norm = float(np.linalg.norm(grad))
    if grad_norm <= tol:
        return theta, 0, grad_norm, "converged"

    for step in range(1, max_iter + 1):
        theta = theta - lr * grad
        if not np.all(np.isfinite(theta)):
            return theta, step, float("nan"), "diverged: parameters became non-finite"
        grad = _gradient_theta(theta, X_bias, y, lam)
        grad_norm = float(np.linalg.norm(grad))
        if grad_norm <= tol:
            return theta, step, grad_norm, "converged"

        if step % 1000 == 0:
            log.debug(
                json_log(
                    "fit.progress",
                    component="logreg",
                    solver="gd",
                    step=step,
                    grad_norm=grad_norm,
                    objective=_objective_theta(theta, X_bias, y, lam),
                )
            )

    return theta, max_iter, grad_norm, f"max_iter={max_iter} reached, gradient norm {grad_norm:.3e}"


def _newton(theta, X_bias, y, lam, max_iter, tol):
    grad = _gradient_theta(theta, X_bias, y, lam)
    grad_norm = float(np.linalg.norm(grad))
    if grad_norm <= tol:
        return theta, 0, grad_norm, "converged"

    for step in range(1, max_iter + 1):
        H = _hessian_theta(theta, X_bias, lam)
        try:
            direction = np.linalg.solve(H, grad)
        except np.linalg.LinAlgError:
            direction = np.linalg.lstsq(H, grad, rcond=None)[0]
        slope = float(grad @ direction)
        if not np.isfinite(slope) or slope <= 0:
            # Hessian numerically indefinite; take a gradient step instead.
            direction = grad
            slope = grad_norm**2

        current = _objective_theta(theta, X_bias, y, lam)
        t = 1.0
        for _ in range(MAX_HALVINGS):
            candidate = theta - t * direction
            if _objective_theta(candidate, X_bias, y, lam) <= current - ARMIJO_C * t * slope:
                break
            t *= 0.5
        else:
            return theta, step, grad_norm, "line search made no progress"

        theta = candidate
        if not np.all(np.isfinite(theta)):
            return theta, step, float("nan"), "diverged: parameters became non-finite"
        grad = _gradient_theta(theta, X_bias, y, lam)
        grad_norm = float(np.linalg.norm(grad))
        if grad_norm <= tol:
            return theta, step, grad_norm, "converged"

    return theta, max_iter, grad_norm, f"max_iter={max_iter} reached, gradient norm {grad_norm:.3e}"


def fit_penalized_logistic(
    X,
    y,
    lam: float = 0.0,
    solver: str = DEFAULT_SOLVER,
    lr: float | None = None,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
) -> PenalizedFit:
    """
    Minimize the ridge-penalized deviance starting from all-zero parameters.

    solver="gd" is batch gradient descent (step 1/Lipschitz unless lr is given),
    solver="newton" is damped Newton / IRLS with Armijo backtracking. Both stop once
    the full gradient norm is <= tol. A run that stops for any other reason comes
    back with converged=False and the reason in `message`; the caller decides what
    to do with it.
    """
    X_arr, y_arr = validate_design(X, y)
    lam = validate_penalty(lam)
    _check_solver_settings(solver, lr, max_iter, tol)

    X_bias = _add_bias(X_arr)
    theta = np.zeros(X_bias.shape[1])
    log.debug(
        json_log(
            "fit.start",
            component="logreg",
            solver=solver,
            lam=lam,
            n_samples=X_arr.shape[0],
            n_features=X_arr.shape[1],
        )
    )

    if solver == "gd":
        step_size = lr if lr is not None else lipschitz_step(X_arr, lam)
        theta, n_iter, grad_norm, message = _gradient_descent(
            theta, X_bias, y_arr, lam, step_size, max_iter, tol
        )
    else:
        theta, n_iter, grad_norm, message = _newton(theta, X_bias, y_arr, lam, max_iter, tol)

    finite = bool(np.all(np.isfinite(theta)))
    converged = message == "converged"
    if np.unique(y_arr).size == 1:
        # unpenalized intercept runs off to +/- inf whatever lam is
        converged = False
        message = "all labels belong to one class; no finite estimate for the intercept"
    elif finite and lam == 0.0:
        margins = (2.0 * y_arr - 1.0) * (X_bias @ theta)
        if np.all(margins > 0):
            converged = False
            message = "classes are perfectly separated; no finite maximum-likelihood estimate"

    fit = PenalizedFit(
        intercept=theta[0],
        coef=theta[1:],
        lam=lam,
        converged=converged,
        n_iter=n_iter,
        objective=_objective_theta(theta, X_bias, y_arr, lam) if finite else float("nan"),
        grad_norm=grad_norm,
        solver=solver,
        message=message,
    )

    if converged:
        log.debug(
            json_log(
                "fit.completed",
                component="logreg",
                solver=solver,
                lam=lam,
                n_iter=n_iter,
                objective=fit.objective,
            )
        )
    else:
        log.warning(
            json_log(
                "fit.not_converged",
                component="logreg",
                solver=solver,
                lam=lam,
                n_iter=n_iter,
                reason=message,
            )
        )
    return fit


class RidgeLogisticRegression:
    """
    Estimator wrapper around fit_penalized_logistic.

    With strict=True (default) a fit that does not converge raises FitFailedError
    instead of leaving a partial estimate on the model. Features can optionally be
    standardized internally; coefficients then live in standardized space.
    """

    def __init__(
        self,
        lam: float = 0.0,
        solver: str = DEFAULT_SOLVER,
        lr: float | None = None,
        max_iter: int = DEFAULT_MAX_ITER,
        tol: float = DEFAULT_TOL,
        standardize: bool = False,
        strict: bool = True,
    ):
        self.lam = lam
        self.solver = solver
        self.lr = lr
        self.max_iter = max_iter
        self.tol = tol
        self.standardize = standardize
        self.strict = strict
        self.fit_: PenalizedFit | None = None
        self.mean_: np.ndarray | None = None
        self.std_: np.ndarray | None = None

    def _transform(self, X) -> np.ndarray:
        X_arr = np.asarray(X, dtype=float)
        if not self.standardize:
            return X_arr
        X_scaled, _, _ = standardize(X_arr, self.mean_, self.std_)
        return X_scaled

    def fit(self, X, y):
        """Fit on (X, y); raises FitFailedError on non-convergence when strict."""
        X_arr, y_arr = validate_design(X, y)
        if self.standardize:
            X_arr, self.mean_, self.std_ = standardize(X_arr)

        result = fit_penalized_logistic(
            X_arr,
            y_arr,
            lam=self.lam,
            solver=self.solver,
            lr=self.lr,
            max_iter=self.max_iter,
            tol=self.tol,
        )
        if not result.converged and self.strict:
            self.fit_ = None
            raise FitFailedError(f"Fit did not converge: {result.message}", fit=result)

        self.fit_ = result
        self.intercept_ = result.intercept
        self.coef_ = result.coef
        self.n_iter_ = result.n_iter
        self.converged_ = result.converged
        return self

    def decision_function(self, X) -> np.ndarray:
        if self.fit_ is None:
            raise RuntimeError("Model is not fitted.")
        return self.intercept_ + self._transform(X) @ self.coef_

    def predict_proba(self, X) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        return sigmoid(self.decision_function(X))

    def predict(self, X, threshold: float = 0.5) -> np.ndarray:
        """Binary predictions using the provided threshold."""
        return (self.predict_proba(X) >= threshold).astype(int)

    def score(self, X, y) -> float:
        """Mean log-likelihood per observation (negative log-loss)."""
        if self.fit_ is None:
            raise RuntimeError("Model is not fitted.")
        X_arr, y_arr = validate_design(X, y)
        return -0.5 * mean_deviance(self.intercept_, self.coef_, self._transform(X_arr), y_arr)
