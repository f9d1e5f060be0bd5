"""
Entropy-regularized distribution update of ERLPBoost.

Given the margin matrix ``U`` of the hypotheses seen so far, the model
minimizes

```
    F(d) = max_j (U^T d)_j + (1/eta) sum_i d_i ln(n d_i)
```

over the capped simplex ``{sum(d) = 1, 0 <= d <= 1/nu}``. Each pass replaces
the entropy by its second-order expansion around the current ``d0`` and
solves the resulting quadratic program

```
    minimize  gamma + (1/eta) (g . d + 1/2 sum_i (d_i - d0_i)^2 / d0_i)
    s.t.      U^T d <= gamma,  d in the capped simplex
```

where ``g = ln(n d0) + 1``. The QP is solved through its dual over the
hypothesis weights ``w`` on the probability simplex: for fixed ``w`` the
minimizing ``d`` is a weighted projection onto the capped simplex, and the
concave dual is maximized with an accelerated projected gradient. The QP
minimizer sets a search direction along which ``F`` is backtracked. Passes
repeat until the QP duality gap and the decrease of ``F`` both fall below
``sub_tolerance``.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..convex.core import Status
from ..convex.projected import accelerated_projected_gradient, project_capped_simplex
from ..errors import ConfigurationError, OptimizerInfeasible
from ..logging import get_logger
from ..utils import entropy_from_uni_distribution
from .base import DistributionOptimizer

logger = get_logger(__name__)


class QPModel(DistributionOptimizer):
    """
    Sequential quadratic approximation of the entropy-regularized LP.

    Args:
        sub_tolerance: Stop once a pass solves its QP to this duality gap and
            improves the regularized objective by less than this amount.
        max_passes: Maximum number of quadratic approximations per update;
            running out raises :class:`OptimizerInfeasible`.
        max_backtracks: Step halvings tried along each QP direction.
        maxiter: Iteration limit of the inner dual solver.
        tol: Step tolerance of the inner dual solver.
        floor: Lower clamp on the expansion point to keep ``1/d0`` finite.
    """

    def __init__(
        self,
        sub_tolerance: float = 1e-6,
        max_passes: int = 100,
        max_backtracks: int = 30,
        maxiter: int = 2000,
        tol: float = 1e-10,
        floor: float = 1e-12,
    ) -> None:
        super().__init__()
        if sub_tolerance <= 0.0:
            raise ConfigurationError("sub_tolerance must be positive.")
        self.sub_tolerance = sub_tolerance
        self.max_passes = max_passes
        self.max_backtracks = max_backtracks
        self.maxiter = maxiter
        self.tol = tol
        self.floor = floor
        self.eta = 1.0

    def initialize(self, n: int, upper_bound: float, eta: Optional[float] = None) -> None:
        if eta is None or not eta > 0.0:
            raise ConfigurationError("The entropy-regularized model needs a positive eta.")
        self._reset(n, upper_bound)
        self.eta = float(eta)

    def objective(self, dist: np.ndarray, margin_matrix: Optional[np.ndarray] = None) -> float:
        """Regularized objective ``F(d)`` over the given (default: stored) columns."""
        if margin_matrix is None:
            margin_matrix = self.margin_matrix
        if margin_matrix.shape[1] == 0:
            raise ValueError("The objective needs at least one hypothesis.")
        max_edge = float(np.max(margin_matrix.T @ dist))
        return max_edge + entropy_from_uni_distribution(dist) / self.eta

    def _solve_quadratic_model(
        self,
        margin_matrix: np.ndarray,
        center: np.ndarray,
        weights0: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray, float]:
        """Return the QP minimizer, the dual weights and the QP duality gap."""
        eta = self.eta
        cap = self.upper_bound
        scale = np.maximum(center, self.floor)
        grad_entropy = np.log(self.n_sample * scale) + 1.0
        offset = scale * (1.0 - grad_entropy)

        cache: dict[bytes, np.ndarray] = {}

        def primal(w: np.ndarray) -> np.ndarray:
            key = w.tobytes()
            if key not in cache:
                cache.clear()
                edges = margin_matrix @ w
                cache[key] = project_capped_simplex(offset - eta * scale * edges, cap, scale=scale)
            return cache[key]

        def neg_dual(w: np.ndarray) -> float:
            d = primal(w)
            quad = grad_entropy @ d + 0.5 * np.sum((d - scale) ** 2 / scale)
            return -float((margin_matrix @ w) @ d + quad / eta)

        def neg_dual_grad(w: np.ndarray) -> np.ndarray:
            return -(margin_matrix.T @ primal(w))

        def proj(w: np.ndarray) -> np.ndarray:
            return project_capped_simplex(w, 1.0)

        spectral = float(np.linalg.norm(margin_matrix, 2)) ** 2
        lipschitz = max(eta * float(np.max(scale)) * spectral / 8.0, 1e-8)
        result = accelerated_projected_gradient(
            neg_dual,
            neg_dual_grad,
            proj,
            x0=weights0,
            lipschitz=lipschitz,
            maxiter=self.maxiter,
            tol=self.tol,
        )
        if result.x is None or result.status is Status.NUMERICAL_ERROR:
            raise OptimizerInfeasible(f"Regularized QP failed: {result.message}")

        weights = np.clip(result.x, 0.0, None)
        weights[weights <= 1e-12] = 0.0
        weights /= weights.sum()
        dist = primal(weights)
        # primal minus dual value of the QP at the returned weights
        edges = margin_matrix.T @ dist
        gap = float(np.max(edges) - weights @ edges)
        return dist, weights, max(gap, 0.0)

    def _line_search(
        self,
        margin_matrix: np.ndarray,
        start: np.ndarray,
        target: np.ndarray,
        start_value: float,
    ) -> tuple[np.ndarray, float]:
        """Halve the step towards ``target`` until ``F`` decreases."""
        direction = target - start
        step = 1.0
        for _ in range(self.max_backtracks):
            candidate = np.clip(start + step * direction, 0.0, self.upper_bound)
            value = self.objective(candidate, margin_matrix)
            if value < start_value:
                return candidate, value
            step *= 0.5
        return start, start_value

    def update(self, dist: np.ndarray, margins: np.ndarray) -> tuple[np.ndarray, float]:
        margin_matrix = self._append_margins(margins)
        t = margin_matrix.shape[1]

        best_dist = np.clip(np.asarray(dist, dtype=float).reshape(-1), 0.0, self.upper_bound)
        if t == 1:
            weights = np.ones(1)
        else:
            weights = np.append(self._weights, 0.0)
        best_value = self.objective(best_dist, margin_matrix)

        converged = False
        passes = 0
        gap = np.inf
        for passes in range(1, self.max_passes + 1):
            target, weights, gap = self._solve_quadratic_model(margin_matrix, best_dist, weights)
            new_dist, value = self._line_search(margin_matrix, best_dist, target, best_value)
            improvement = best_value - value
            if improvement > 0.0:
                best_dist, best_value = new_dist, value
            if gap <= self.sub_tolerance and improvement < self.sub_tolerance:
                converged = True
                break

        if not converged:
            raise OptimizerInfeasible(
                f"Regularized update did not settle within {passes} passes "
                f"(QP gap {gap:.3e}, sub_tolerance {self.sub_tolerance:.3e})."
            )

        self._dist = best_dist
        self._weights = weights
        logger.debug(
            "Regularized update over %d hypotheses: %d passes, objective=%.6f, QP gap=%.3e",
            t,
            passes,
            best_value,
            gap,
        )
        return best_dist.copy(), best_value


__all__ = ["QPModel"]
