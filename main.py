from __future__ import annotations

"""
CLI entrypoint for the ridge logistic experiments. Pick experiment via
--experiment: compare (lam=0 vs ridge on one held-out sample), path (shrinkage
path over a lam grid), bias_variance (repeated simulations).
"""

import argparse
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
from ridge_logit.constants import (
    DEFAULT_LAMBDAS,
    DEFAULT_MAX_ITER,
    DEFAULT_TOL,
    N_FEATURES,
    N_TEST,
    N_TRAIN,
    PATH_LAMBDAS,
    RANDOM_STATE,
    SIGNAL,
    SOLVERS,
)
from ridge_logit.data_prep import standardize
from ridge_logit.metrics import summarize_coefficients


def parse_lambdas(raw: str) -> list[float]:
    try:
        lambdas = [float(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid lambda list {raw!r}: {exc}") from exc
    if not lambdas:
        raise argparse.ArgumentTypeError("lambda list is empty")
    if any(lam < 0 for lam in lambdas):
        raise argparse.ArgumentTypeError("lambdas must be >= 0")
    return lambdas


def describe_config(config: SimulationConfig):
    """Print a short summary of the simulated design."""
    print(
        f"n_train={config.n_train}, n_test={config.n_test}, p={config.n_features}, "
        f"informative={config.informative}, signal={config.signal}"
    )
    print(
        f"solver={config.solver}, max_iter={config.max_iter}, tol={config.tol}, "
        f"standardize={config.standardize}"
    )


def print_comparison(summary):
    """One line per lam from held_out_comparison."""
    for lam, row in summary.iterrows():
        status = "ok" if row["converged"] else "NOT CONVERGED"
        print(
            f"[lambda={lam:g}] {status} | steps {int(row['n_iter'])} | "
            f"||b|| {row['coef_norm']:.3f} | coef MSE {row['coef_mse']:.3f} | "
            f"train dev {row['train_deviance']:.4f} | test log-loss {row['test_log_loss']:.4f} | "
            f"AUC {row['test_roc_auc']:.3f} | Acc {row['test_accuracy']:.3f}"
        )


def build_arg_parser():
    """CLI parser with knobs for simulation size, solver and experiment choice."""
    parser = argparse.ArgumentParser(
        description="Bias-variance study of ridge-penalized logistic regression."
    )
    parser.add_argument(
        "--experiment",
        choices=["compare", "path", "bias_variance"],
        default="compare",
        help="compare: held-out lam comparison; path: shrinkage path; "
        "bias_variance: repeated simulations.",
    )
    parser.add_argument("--n-train", type=int, default=N_TRAIN)
    parser.add_argument("--n-test", type=int, default=N_TEST)
    parser.add_argument("--n-features", type=int, default=N_FEATURES)
    parser.add_argument("--n-informative", type=int, default=None, help="Defaults to p/2.")
    parser.add_argument("--signal", type=float, default=SIGNAL, help="Magnitude of true weights.")
    parser.add_argument(
        "--lambdas",
        type=parse_lambdas,
        default=None,
        help="Comma-separated penalty strengths (default depends on experiment).",
    )
    parser.add_argument("--solver", choices=SOLVERS, default="gd")
    parser.add_argument("--lr", type=float, default=None, help="GD step size (default 1/Lipschitz).")
    parser.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITER)
    parser.add_argument("--tol", type=float, default=DEFAULT_TOL, help="Gradient-norm tolerance.")
    parser.add_argument("--reps", type=int, default=50, help="Repetitions for bias_variance.")
    parser.add_argument("--no-standardize", action="store_true", help="Fit on raw features.")
    parser.add_argument("--plots-dir", type=Path, default=None, help="Write PNG figures here.")
    parser.add_argument("--random-state", type=int, default=RANDOM_STATE)
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        n_train=args.n_train,
        n_test=args.n_test,
        n_features=args.n_features,
        n_informative=args.n_informative,
        signal=args.signal,
        standardize=not args.no_standardize,
        solver=args.solver,
        lr=args.lr,
        max_iter=args.max_iter,
        tol=args.tol,
        random_state=args.random_state,
    ).validate()


def run_compare(args: argparse.Namespace):
    """Maximum likelihood vs ridge on one training sample, scored on a large test sample."""
    config = config_from_args(args)
    describe_config(config)
    lambdas = args.lambdas or list(DEFAULT_LAMBDAS)

    result = held_out_comparison(config, lambdas)
    print_comparison(result.summary)

    names = [f"x{j}" for j in range(config.n_features)]
    for lam, fit in result.fits.items():
        if not fit.converged:
            print(f"lambda={lam:g}: {fit.message}")
            continue
        top = summarize_coefficients(fit.coef, names, top_k=5)
        print(f"\nLargest positive weights (lambda={lam:g}):")
        print(top["positive"].round(3).to_string())

    if args.plots_dir:
        from ridge_logit.plots import plot_estimates_vs_truth, plot_roc_curves

        labels = {f"lambda={lam:g}": probs for lam, probs in result.test_probs.items()}
        plot_roc_curves(result.y_test, labels, args.plots_dir / "roc_curves.png")
        estimates = {
            f"lambda={lam:g}": fit.coef for lam, fit in result.fits.items() if fit.converged
        }
        plot_estimates_vs_truth(
            result.beta_true, estimates, args.plots_dir / "estimates_vs_truth.png"
        )


def run_path(args: argparse.Namespace):
    """Shrinkage of the fitted weights along a lam grid for one training sample."""
    config = config_from_args(args)
    describe_config(config)
    lambdas = args.lambdas or list(PATH_LAMBDAS)

    rng = np.random.default_rng(config.random_state)
    beta_true = make_true_coefficients(config.n_features, config.informative, config.signal)
    X, y = simulate_logistic(config.n_train, beta_true, config.intercept, rng)
    if config.standardize:
        X, _, _ = standardize(X)

    summary, coef_df = coefficient_path(X, y, lambdas, **config.fit_kwargs())
    print(f"True ||b||^2: {np.dot(beta_true, beta_true):.3f}")
    for lam, row in summary.iterrows():
        status = "ok" if row["converged"] else "NOT CONVERGED"
        print(
            f"[lambda={lam:g}] {status} | ||b||^2 {row['coef_norm_sq']:.4f} | "
            f"intercept {row['intercept']:.4f} | objective {row['objective']:.4f} | "
            f"deviance {row['mean_deviance']:.4f} | steps {int(row['n_iter'])}"
        )

    if args.plots_dir:
        from ridge_logit.plots import plot_coefficient_path

        plot_coefficient_path(coef_df, args.plots_dir / "coefficient_path.png")


def run_bias_variance(args: argparse.Namespace):
    """Repeated simulations: squared bias, variance and MSE of the weights per lam."""
    config = config_from_args(args)
    describe_config(config)
    lambdas = args.lambdas or list(PATH_LAMBDAS)

    study = bias_variance_study(config, lambdas, n_reps=args.reps)
    print(f"Repetitions: {args.reps}")
    for lam, row in study.iterrows():
        print(
            f"[lambda={lam:g}] bias^2 {row['bias_sq']:.4f} | var {row['variance']:.4f} | "
            f"MSE {row['mse']:.4f} | test log-loss {row['test_log_loss']:.4f} | "
            f"failed {int(row['n_failed'])}/{int(row['n_fits'] + row['n_failed'])}"
        )

    if args.plots_dir:
        from ridge_logit.plots import plot_bias_variance

        plot_bias_variance(study, args.plots_dir / "bias_variance.png")


def main(args: argparse.Namespace | None = None):
    """Dispatch to the selected experiment."""
    args = args or build_arg_parser().parse_args()

    if args.experiment == "compare":
        run_compare(args)
    elif args.experiment == "path":
        run_path(args)
    else:
        run_bias_variance(args)


if __name__ == "__main__":
    main()
