"""
Soft margin linear program solved by column generation.

Over the hypotheses ``h_1, ..., h_t`` seen so far, the model solves

```
    minimize    gamma
    subject to  sum_i d_i y_i h_j(x_i) <= gamma     for j = 1..t
                sum_i d_i = 1,  0 <= d_i <= 1/nu
```

The optimal ``d`` is the next example weighting and ``gamma`` the dual
bound of LPBoost. The negated marginals of the edge constraints are the
weights of the primal soft margin problem over the same hypotheses.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..convex.core import LPProblem, Status
from ..convex.lp import solve_lp
from ..errors import OptimizerInfeasible
from ..logging import get_logger
from .base import DistributionOptimizer

logger = get_logger(__name__)


class LPModel(DistributionOptimizer):
    """
    Column-generation LP over the capped simplex.

    Args:
        maxiter: Simplex iteration limit per solve.
        tol: Primal and dual feasibility tolerance passed to HiGHS.
        zero_tol: Hypothesis weights at or below this value are set to zero.
    """

    def __init__(self, maxiter: int = 10000, tol: float = 1e-9, zero_tol: float = 1e-12) -> None:
        super().__init__()
        self.maxiter = maxiter
        self.tol = tol
        self.zero_tol = zero_tol
        self.gamma: Optional[float] = None

    def initialize(self, n: int, upper_bound: float, eta: Optional[float] = None) -> None:
        del eta  # the LP has no regularization
        self._reset(n, upper_bound)
        self.gamma = None

    def _problem(self, margin_matrix: np.ndarray) -> LPProblem:
        n, t = margin_matrix.shape
        c = np.zeros(n + 1)
        c[-1] = 1.0
        g_mat = np.hstack([margin_matrix.T, -np.ones((t, 1))])
        a_mat = np.hstack([np.ones((1, n)), np.zeros((1, 1))])
        lb = np.concatenate([np.zeros(n), [-np.inf]])
        ub = np.concatenate([np.full(n, self.upper_bound), [np.inf]])
        return LPProblem(c=c, A=a_mat, b=np.ones(1), G=g_mat, h=np.zeros(t), lb=lb, ub=ub)

    def update(self, dist: np.ndarray, margins: np.ndarray) -> tuple[np.ndarray, float]:
        del dist  # the LP is re-solved from scratch over all columns
        margin_matrix = self._append_margins(margins)
        result = solve_lp(self._problem(margin_matrix), maxiter=self.maxiter, tol=self.tol)
        if result.status is not Status.OPTIMAL or result.x is None or result.ineq_dual is None:
            raise OptimizerInfeasible(
                f"Soft margin LP failed ({result.status.value}): {result.message}"
            )

        n = self.n_sample
        new_dist = np.clip(result.x[:n], 0.0, self.upper_bound)
        weights = np.clip(-result.ineq_dual, 0.0, None)
        weights[weights <= self.zero_tol] = 0.0
        total = float(weights.sum())
        if total <= 0.0:
            raise OptimizerInfeasible("Soft margin LP returned no positive hypothesis weight.")

        self._dist = new_dist
        self._weights = weights / total
        self.gamma = float(result.fun)
        logger.debug(
            "LP solved over %d hypotheses in %d iterations, gamma=%.6f",
            self.n_hypotheses,
            result.nit,
            self.gamma,
        )
        return new_dist.copy(), self.gamma


__all__ = ["LPModel"]
