"""
Problem and result types of the convex optimization layer.

Linear programs are stored in the form

```
    minimize    c^T x
    subject to  A x = b,  G x <= h,  lb <= x <= ub
```

where every constraint block is optional. Solvers report back through
:class:`OptimizeResult`, whose ``status`` the distribution optimizers check
before trusting ``x`` or the dual information.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class Status(Enum):
    """Exit status of a solver."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    MAX_ITER = "max_iter"
    NUMERICAL_ERROR = "numerical_error"


@dataclass
class LPProblem:
    """Linear program; ``None`` blocks are absent and ``None`` bounds are free."""

    c: np.ndarray
    A: Optional[np.ndarray] = None
    b: Optional[np.ndarray] = None
    G: Optional[np.ndarray] = None
    h: Optional[np.ndarray] = None
    lb: Optional[np.ndarray] = None
    ub: Optional[np.ndarray] = None


@dataclass
class OptimizeResult:
    """
    Outcome of a solve.

    Attributes:
        x: Solution, or ``None`` unless ``status`` is OPTIMAL (the projected
            methods also return their last iterate on MAX_ITER).
        fun: Objective value at ``x``.
        status: Exit status.
        message: Solver message.
        nit: Iterations performed.
        primal_residual: Largest constraint violation (LP) or projected
            gradient norm (first-order methods).
        slack: ``h - G x`` for the inequality block.
        ineq_dual: Marginals of ``G x <= h``: the change of the optimal value
            per unit increase of ``h``. Non-positive for a minimization.
        eq_dual: Marginals of ``A x = b``.
    """

    x: Optional[np.ndarray]
    fun: Optional[float]
    status: Status
    message: str
    nit: int
    primal_residual: Optional[float] = None
    slack: Optional[np.ndarray] = None
    ineq_dual: Optional[np.ndarray] = None
    eq_dual: Optional[np.ndarray] = None


__all__ = ["Status", "LPProblem", "OptimizeResult"]
