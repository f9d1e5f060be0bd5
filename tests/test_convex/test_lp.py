import numpy as np
import pytest

from marginboost.convex.core import LPProblem, Status
from marginboost.convex.lp import linprog_wrapper, solve_lp


def test_linprog_canonical_example():
    c = np.array([-3.0, -5.0])
    G = np.array([[1.0, 2.0], [3.0, 2.0]])
    h = np.array([4.0, 6.0])
    result = linprog_wrapper(c, None, None, g_mat=G, h_vec=h, lb=np.zeros(2))
    assert result.status is Status.OPTIMAL
    assert np.allclose(result.x, np.array([1.0, 1.5]), atol=1e-6)
    assert pytest.approx(-10.5, rel=1e-8) == result.fun
    assert np.allclose(result.slack, np.zeros(2), atol=1e-8)


def test_linprog_infeasible():
    c = np.array([1.0])
    G = np.array([[-1.0], [1.0]])
    h = np.array([-1.0, 0.0])
    result = linprog_wrapper(c, None, None, g_mat=G, h_vec=h)
    assert result.status is not Status.OPTIMAL
    assert result.x is None


def test_linprog_handles_equalities():
    c = np.array([1.0, 2.0])
    A = np.array([[1.0, 1.0]])
    b = np.array([1.0])
    res = linprog_wrapper(c, a_mat=A, b_vec=b, lb=np.zeros(2))
    assert res.status is Status.OPTIMAL
    assert pytest.approx(1.0, rel=1e-8) == res.fun
    assert np.allclose(res.x, [1.0, 0.0], atol=1e-8)
    assert res.eq_dual is not None
    assert pytest.approx(1.0, abs=1e-8) == res.eq_dual[0]


def test_linprog_upper_bounds():
    c = np.array([-1.0])
    res = linprog_wrapper(c, None, None, lb=np.zeros(1), ub=np.array([1.0]))
    assert res.status is Status.OPTIMAL
    assert pytest.approx(-1.0, rel=1e-8) == res.fun
    assert pytest.approx(1.0, rel=1e-8) == res.x[0]


def test_linprog_bound_dimension_error():
    with pytest.raises(ValueError):
        linprog_wrapper(np.ones(2), None, None, lb=np.zeros(3))


def test_inequality_marginals_are_non_positive():
    # min gamma s.t. d . u_j <= gamma over the simplex
    U = np.array([[1.0, -1.0], [-1.0, 1.0]])
    c = np.array([0.0, 0.0, 1.0])
    G = np.hstack([U.T, -np.ones((2, 1))])
    A = np.array([[1.0, 1.0, 0.0]])
    lb = np.array([0.0, 0.0, -np.inf])
    res = linprog_wrapper(c, A, np.ones(1), g_mat=G, h_vec=np.zeros(2), lb=lb)
    assert res.status is Status.OPTIMAL
    assert pytest.approx(0.0, abs=1e-9) == res.fun
    assert np.all(res.ineq_dual <= 1e-12)
    assert pytest.approx(1.0, abs=1e-9) == -np.sum(res.ineq_dual)


def test_solve_lp_problem():
    problem = LPProblem(
        c=np.array([1.0, 1.0]),
        A=np.array([[1.0, 2.0]]),
        b=np.array([2.0]),
        lb=np.zeros(2),
    )
    res = solve_lp(problem)
    assert res.status is Status.OPTIMAL
    assert np.allclose(res.x, [0.0, 1.0], atol=1e-8)
