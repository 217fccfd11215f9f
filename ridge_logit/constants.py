from __future__ import annotations

"""
Defaults shared by the simulation, the fitter and the CLI.
"""

N_TRAIN = 400
N_TEST = 5000
N_FEATURES = 100
SIGNAL = 0.2

DEFAULT_LAMBDAS = (0.0, 0.1)
PATH_LAMBDAS = (0.0, 0.001, 0.003, 0.01, 0.03, 0.1, 0.3, 1.0, 3.0)

SOLVERS = ("gd", "newton")
DEFAULT_SOLVER = "gd"
DEFAULT_MAX_ITER = 10000
DEFAULT_TOL = 1e-6

# exp() overflows float64 a little above 709
SIGMOID_CLIP = 500.0

RANDOM_STATE = 42
