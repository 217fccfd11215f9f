"""
Ridge-penalized logistic regression and a simulation study of its bias-variance tradeoff.

This package contains the penalized fitter, a synthetic data generator, metric
helpers and the experiments and plots used by main.py.
"""

from .errors import FitFailedError, InvalidInputError, RidgeLogitError
from .experiments import (
    bias_variance_study,
    coefficient_path,
    fit_sklearn_reference,
    held_out_comparison,
)
from .logreg import (
    PenalizedFit,
    RidgeLogisticRegression,
    fit_penalized_logistic,
    gradient,
    objective,
)
from .metrics import coefficient_error_summary, compute_classification_metrics
from .simulation import SimulationConfig, make_true_coefficients, simulate_logistic

__all__ = [
    "FitFailedError",
    "InvalidInputError",
    "RidgeLogitError",
    "bias_variance_study",
    "coefficient_path",
    "fit_sklearn_reference",
    "held_out_comparison",
    "PenalizedFit",
    "RidgeLogisticRegression",
    "fit_penalized_logistic",
    "gradient",
    "objective",
    "coefficient_error_summary",
    "compute_classification_metrics",
    "SimulationConfig",
    "make_true_coefficients",
    "simulate_logistic",
]
