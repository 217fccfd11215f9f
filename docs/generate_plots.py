"""
Regenerate the figures used in the write-up: shrinkage path, held-out ROC curves,
estimates vs. truth and the bias-variance curves.
"""

from pathlib import Path

import numpy as np

from ridge_logit import (
    SimulationConfig,
    bias_variance_study,
    coefficient_path,
    held_out_comparison,
    make_true_coefficients,
    simulate_logistic,
)
from ridge_logit.constants import PATH_LAMBDAS
from ridge_logit.data_prep import standardize
from ridge_logit.plots import (
    plot_bias_variance,
    plot_coefficient_path,
    plot_estimates_vs_truth,
    plot_roc_curves,
)

# Configuration
OUTPUT_DIR = Path(__file__).resolve().parent / "figures"
N_REPS = 100
CONFIG = SimulationConfig(solver="newton")


def run_path():
    print("Generating shrinkage path...")
    rng = np.random.default_rng(CONFIG.random_state)
    beta_true = make_true_coefficients(CONFIG.n_features, CONFIG.informative, CONFIG.signal)
    X, y = simulate_logistic(CONFIG.n_train, beta_true, CONFIG.intercept, rng)
    X, _, _ = standardize(X)
    _, coef_df = coefficient_path(X, y, PATH_LAMBDAS, **CONFIG.fit_kwargs())
    plot_coefficient_path(coef_df, OUTPUT_DIR / "coefficient_path.png")


def run_compare():
    print("Generating held-out comparison (lambda = 0 vs 0.1)...")
    result = held_out_comparison(CONFIG, lambdas=(0.0, 0.1))
    plot_roc_curves(
        result.y_test,
        {f"lambda={lam:g}": probs for lam, probs in result.test_probs.items()},
        OUTPUT_DIR / "roc_curves.png",
    )
    plot_estimates_vs_truth(
        result.beta_true,
        {f"lambda={lam:g}": fit.coef for lam, fit in result.fits.items() if fit.converged},
        OUTPUT_DIR / "estimates_vs_truth.png",
    )


def run_bias_variance():
    print(f"Generating bias-variance curves ({N_REPS} repetitions)...")
    study = bias_variance_study(CONFIG, PATH_LAMBDAS, n_reps=N_REPS)
    plot_bias_variance(study, OUTPUT_DIR / "bias_variance.png")


if __name__ == "__main__":
    run_path()
    run_compare()
    run_bias_variance()
    print(f"All plots written to {OUTPUT_DIR}")
