"""
Linear programming through SciPy's HiGHS interface.

Problems are given in the generic form

```
    minimize    c^T x
    subject to  A x = b
                G x <= h
                lb <= x <= ub
```

and the result carries the constraint marginals reported by HiGHS, which
column-generation boosters read as hypothesis weights.

Example:
    >>> import numpy as np
    >>> from marginboost.convex.lp import linprog_wrapper
    >>> c = np.array([-3.0, -5.0])  # maximize 3x + 5y -> minimize negative
    >>> G = np.array([[1.0, 2.0], [3.0, 2.0]])
    >>> h = np.array([4.0, 6.0])
    >>> result = linprog_wrapper(c, None, None, g_mat=G, h_vec=h, lb=np.zeros(2))
    >>> result.status
    <Status.OPTIMAL: 'optimal'>

References:
    - Huangfu & Hall, *Parallelizing the dual revised simplex method*, 2018.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.optimize import linprog as _scipy_linprog

from .core import LPProblem, OptimizeResult, Status

# scipy.optimize.linprog status codes
_STATUS_MAP = {
    0: Status.OPTIMAL,
    1: Status.MAX_ITER,
    2: Status.INFEASIBLE,
    3: Status.UNBOUNDED,
    4: Status.NUMERICAL_ERROR,
}


def _coerce_bound(vec: Optional[np.ndarray], n: int, fill: float) -> np.ndarray:
    if vec is None:
        return np.full(n, fill)
    arr = np.asarray(vec, dtype=float)
    if arr.ndim == 0:
        return np.full(n, float(arr))
    arr = arr.reshape(-1)
    if arr.shape[0] != n:
        raise ValueError("Bounds must match variable dimension")
    return arr


def _bounds(
    n: int, lb: Optional[np.ndarray], ub: Optional[np.ndarray]
) -> list[tuple[Optional[float], Optional[float]]]:
    lb_vec = _coerce_bound(lb, n, -np.inf)
    ub_vec = _coerce_bound(ub, n, np.inf)
    return [
        (float(lo) if np.isfinite(lo) else None, float(hi) if np.isfinite(hi) else None)
        for lo, hi in zip(lb_vec, ub_vec)
    ]


def linprog_wrapper(
    c: np.ndarray,
    a_mat: Optional[np.ndarray],
    b_vec: Optional[np.ndarray],
    g_mat: Optional[np.ndarray] = None,
    h_vec: Optional[np.ndarray] = None,
    lb: Optional[np.ndarray] = None,
    ub: Optional[np.ndarray] = None,
    maxiter: int = 10000,
    tol: float = 1e-9,
) -> OptimizeResult:
    """
    Solve an LP with the HiGHS dual simplex.

    Unlike ``scipy.optimize.linprog``, a missing ``lb`` means the variables
    are free rather than non-negative.

    Raises:
        ValueError: If the bounds do not match the number of variables.
    """

    c_arr = np.asarray(c, dtype=float).reshape(-1)
    n = c_arr.shape[0]
    bounds = _bounds(n, lb, ub)

    res = _scipy_linprog(
        c=c_arr,
        A_eq=a_mat,
        b_eq=b_vec,
        A_ub=g_mat,
        b_ub=h_vec,
        bounds=bounds,
        method="highs-ds",
        options={
            "maxiter": maxiter,
            "primal_feasibility_tolerance": tol,
            "dual_feasibility_tolerance": tol,
        },
    )
    status = _STATUS_MAP.get(res.status, Status.NUMERICAL_ERROR)
    if status is not Status.OPTIMAL:
        return OptimizeResult(
            x=None,
            fun=None,
            status=status,
            message=res.message,
            nit=int(res.nit),
        )

    x = np.asarray(res.x, dtype=float)
    slack = None
    ineq_dual = None
    primal_residual = 0.0
    if g_mat is not None and h_vec is not None:
        slack = np.asarray(h_vec, dtype=float) - np.asarray(g_mat, dtype=float) @ x
        ineq_dual = np.asarray(res.ineqlin.marginals, dtype=float)
        primal_residual = max(primal_residual, float(np.max(-slack, initial=0.0)))
    eq_dual = None
    if a_mat is not None and b_vec is not None:
        eq_residual = np.asarray(a_mat, dtype=float) @ x - np.asarray(b_vec, dtype=float)
        primal_residual = max(primal_residual, float(np.linalg.norm(eq_residual, ord=np.inf)))
        eq_dual = np.asarray(res.eqlin.marginals, dtype=float)

    return OptimizeResult(
        x=x,
        fun=float(res.fun),
        status=Status.OPTIMAL,
        message=res.message,
        nit=int(res.nit),
        primal_residual=primal_residual,
        slack=slack,
        ineq_dual=ineq_dual,
        eq_dual=eq_dual,
    )


def solve_lp(problem: LPProblem, maxiter: int = 10000, tol: float = 1e-9) -> OptimizeResult:
    """Solve an :class:`LPProblem` with :func:`linprog_wrapper`."""
    return linprog_wrapper(
        problem.c,
        problem.A,
        problem.b,
        g_mat=problem.G,
        h_vec=problem.h,
        lb=problem.lb,
        ub=problem.ub,
        maxiter=maxiter,
        tol=tol,
    )


__all__ = ["linprog_wrapper", "solve_lp"]
