"""
Convex optimization layer used by the distribution optimizers.

Linear programs are delegated to SciPy's HiGHS solver; the projected methods
and capped-simplex projections are NumPy-only.
"""

from . import core, lp, projected
from .core import LPProblem, OptimizeResult, Status
from .lp import linprog_wrapper, solve_lp
from .projected import (
    accelerated_projected_gradient,
    project_capped_simplex,
)

__all__ = [
    "core",
    "lp",
    "projected",
    # Core types
    "Status",
    "OptimizeResult",
    "LPProblem",
    # Algorithms
    "linprog_wrapper",
    "solve_lp",
    "accelerated_projected_gradient",
    "project_capped_simplex",
]
