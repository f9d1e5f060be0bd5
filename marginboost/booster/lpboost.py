"""
LPBoost: soft margin optimization by column generation.

Each round adds the weak learner's hypothesis as a new column of the soft
margin LP and re-solves it. The run stops once the best edge seen so far is
within ``tolerance`` of the LP value. Convergence is only guaranteed in the
limit, so :meth:`LPBoost.run` needs an explicit round budget.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..sample import Sample
from ..solvers.lp_model import LPModel
from ..utils import edge_from_margins
from .core import MarginBoostingEngine, RoundUpdate


class ColumnGenerationUpdate(RoundUpdate):
    """
    Plain column-generation round.

    Args:
        maxiter: Simplex iteration limit of every LP solve.
        tol: Feasibility tolerance of every LP solve.
    """

    name = "LPBoost"
    certify_before_update = False

    def __init__(self, maxiter: int = 10000, tol: float = 1e-9) -> None:
        self.maxiter = maxiter
        self.tol = tol

    def make_optimizer(self, n_sample: int, upper_bound: float) -> LPModel:
        model = LPModel(maxiter=self.maxiter, tol=self.tol)
        model.initialize(n_sample, upper_bound)
        return model

    def primal_value(self, margins: np.ndarray, dist: np.ndarray) -> float:
        return edge_from_margins(margins, dist)

    def threshold(self, tolerance: float) -> float:
        return tolerance


class LPBoost(MarginBoostingEngine):
    """
    LPBoost booster.

    Example:
        >>> booster = LPBoost(sample, tolerance=0.01, nu=5.0)
        >>> result = booster.run(DecisionStump(), max_rounds=200)
        >>> result.hypothesis.predict_all(sample)
    """

    def __init__(
        self,
        sample: Sample,
        tolerance: Optional[float] = None,
        nu: float = 1.0,
        maxiter: int = 10000,
        tol: float = 1e-9,
    ) -> None:
        super().__init__(
            sample,
            ColumnGenerationUpdate(maxiter=maxiter, tol=tol),
            tolerance=tolerance,
            nu=nu,
        )


__all__ = ["ColumnGenerationUpdate", "LPBoost"]
