"""
Projected first-order methods and projections onto capped simplices.

``accelerated_projected_gradient`` is the FISTA scheme of Beck & Teboulle
(2009) with backtracking on the Lipschitz estimate and function-value
restarts (O'Donoghue & Candes, 2015). It requires user-provided
objective/gradient functions as well as a projection operator.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from .core import OptimizeResult, Status

Objective = Callable[[np.ndarray], float]
Gradient = Callable[[np.ndarray], np.ndarray]
Projection = Callable[[np.ndarray], np.ndarray]


def accelerated_projected_gradient(
    obj: Objective,
    grad_fun: Gradient,
    proj: Projection,
    x0: np.ndarray,
    lipschitz: float = 1.0,
    maxiter: int = 1000,
    tol: float = 1e-10,
    backtrack: float = 2.0,
) -> OptimizeResult:
    """
    Accelerated projected gradient (FISTA) for smooth convex objectives.

    Args:
        obj: Objective to minimize.
        grad_fun: Gradient of ``obj``.
        proj: Euclidean projection onto the feasible set.
        x0: Starting point (projected before use).
        lipschitz: Initial estimate of the gradient's Lipschitz constant;
            increased by ``backtrack`` until the quadratic upper bound holds.
        maxiter: Maximum number of iterations.
        tol: Stop once successive iterates differ by at most ``tol``.
    """

    if lipschitz <= 0.0 or backtrack <= 1.0:
        raise ValueError("lipschitz must be positive and backtrack greater than one")

    x = proj(np.asarray(x0, dtype=float).reshape(-1))
    value = obj(x)
    y = x.copy()
    momentum = 1.0
    step_bound = float(lipschitz)
    converged = False
    nit = 0
    for nit in range(1, maxiter + 1):
        grad = grad_fun(y)
        value_y = obj(y)
        slack = 1e-14 * max(1.0, abs(value_y))
        for _ in range(60):
            candidate = proj(y - grad / step_bound)
            step = candidate - y
            candidate_value = obj(candidate)
            if candidate_value <= value_y + grad.dot(step) + 0.5 * step_bound * step.dot(step) + slack:
                break
            step_bound *= backtrack

        if candidate_value > value:
            if momentum > 1.0:
                # restart: retry with a plain projected step from x
                momentum = 1.0
                y = x.copy()
                continue
            # a plain step from x cannot decrease obj: x is optimal up to rounding
            converged = True
            break

        change = candidate - x
        next_momentum = 0.5 * (1.0 + math.sqrt(1.0 + 4.0 * momentum * momentum))
        y = candidate + ((momentum - 1.0) / next_momentum) * change
        x = candidate
        value = candidate_value
        momentum = next_momentum
        if np.linalg.norm(change) <= tol:
            converged = True
            break

    status = Status.OPTIMAL if converged else Status.MAX_ITER
    return OptimizeResult(
        x=x,
        fun=float(value),
        status=status,
        message=(
            "Accelerated projected gradient terminated"
            if converged
            else "Accelerated projected gradient hit iteration limit"
        ),
        nit=nit,
        primal_residual=float(np.linalg.norm(proj(x - grad_fun(x)) - x)),
    )


def project_capped_simplex(
    v: np.ndarray,
    cap: float = 1.0,
    scale: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Project ``v`` onto ``{d : sum(d) = 1, 0 <= d <= cap}``.

    With ``scale = s`` the projection is taken in the weighted norm
    ``sum_i (d_i - v_i)^2 / s_i``. The minimizer has the form
    ``d_i = clip(v_i - s_i * mu, 0, cap)``; the coordinate sum is piecewise
    linear and non-increasing in ``mu``. The sorted breakpoints where a
    coordinate reaches 0 or ``cap`` are bisected for the segment holding
    sum 1, and ``mu`` is interpolated on that segment. Cost is
    ``O(n log n)`` time and ``O(n)`` memory.

    Raises:
        ValueError: If the capped simplex is empty (``n * cap < 1``) or the
            scale is not strictly positive.
    """

    v = np.asarray(v, dtype=float).reshape(-1)
    n = v.shape[0]
    if n == 0:
        raise ValueError("Cannot project an empty vector")
    if cap <= 0.0 or n * cap < 1.0 - 1e-12:
        raise ValueError(f"Capped simplex is empty for n={n}, cap={cap}")
    s = np.ones(n) if scale is None else np.asarray(scale, dtype=float).reshape(-1)
    if s.shape[0] != n or np.any(s <= 0.0):
        raise ValueError("scale must be a positive vector matching v")

    def total(mu: float) -> float:
        return float(np.clip(v - mu * s, 0.0, cap).sum())

    breakpoints = np.unique(np.concatenate([v / s, (v - cap) / s]))
    # total(breakpoints[0]) = n * cap >= 1 and total(breakpoints[-1]) = 0
    k_lo, k_hi = 0, breakpoints.shape[0] - 1
    while k_hi - k_lo > 1:
        k_mid = (k_lo + k_hi) // 2
        if total(breakpoints[k_mid]) >= 1.0:
            k_lo = k_mid
        else:
            k_hi = k_mid

    lo, hi = breakpoints[k_lo], breakpoints[k_hi]
    total_lo, total_hi = total(lo), total(hi)
    if total_lo - total_hi <= 0.0:
        mu = lo
    else:
        mu = lo + (total_lo - 1.0) / (total_lo - total_hi) * (hi - lo)
    return np.clip(v - mu * s, 0.0, cap)


__all__ = [
    "accelerated_projected_gradient",
    "project_capped_simplex",
]
