from __future__ import annotations

"""
Exception types raised by the fitter and the input checks.
"""


class RidgeLogitError(Exception):
    """Base class for errors raised by ridge_logit."""


class InvalidInputError(RidgeLogitError, ValueError):
    """Design matrix, labels or solver settings failed validation."""


class FitFailedError(RidgeLogitError, RuntimeError):
    """The solver stopped without satisfying its convergence criterion."""

    def __init__(self, message: str, fit=None):
        super().__init__(message)
        self.fit = fit
