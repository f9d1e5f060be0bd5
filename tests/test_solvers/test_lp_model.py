import numpy as np
import pytest

from marginboost.errors import ConfigurationError
from marginboost.solvers import LPModel
from marginboost.utils import is_capped_distribution


def _random_margins(rng, n, t):
    return np.sign(rng.standard_normal((n, t)))


def test_initialize_rejects_empty_capped_simplex():
    model = LPModel()
    with pytest.raises(ConfigurationError):
        model.initialize(0, 1.0)
    with pytest.raises(ConfigurationError):
        model.initialize(5, 0.1)


def test_update_before_initialize_raises():
    with pytest.raises(RuntimeError):
        LPModel().update(np.full(3, 1.0 / 3.0), np.ones(3))


def test_update_rejects_wrong_length():
    model = LPModel()
    model.initialize(4, 1.0)
    with pytest.raises(ValueError):
        model.update(np.full(4, 0.25), np.ones(3))


def test_single_constant_column():
    model = LPModel()
    model.initialize(10, 1.0)
    dist, gamma = model.update(np.full(10, 0.1), np.full(10, 0.3))
    assert pytest.approx(0.3, abs=1e-9) == gamma
    assert is_capped_distribution(dist, 1.0)
    assert np.allclose(model.final_weights(), [1.0])


def test_weights_and_dual_bound(rng):
    n, t = 20, 6
    U = _random_margins(rng, n, t)
    model = LPModel()
    model.initialize(n, 1.0 / 4.0)
    dist = np.full(n, 1.0 / n)
    for j in range(t):
        dist, gamma = model.update(dist, U[:, j])

    weights = model.final_weights()
    assert weights.shape == (t,)
    assert np.all(weights >= 0.0)
    assert pytest.approx(1.0, abs=1e-9) == np.sum(weights)
    assert is_capped_distribution(dist, 0.25)
    # the LP value is the largest edge over the history at the optimal d
    assert pytest.approx(np.max(U.T @ dist), abs=1e-7) == gamma
    assert model.n_hypotheses == t
    assert model.margin_matrix.shape == (n, t)


def test_capping_is_respected(rng):
    n, nu = 50, 5.0
    U = _random_margins(rng, n, 10)
    model = LPModel()
    model.initialize(n, 1.0 / nu)
    dist = np.full(n, 1.0 / n)
    for j in range(U.shape[1]):
        dist, _ = model.update(dist, U[:, j])
        assert np.all(dist <= 0.2 + 1e-9)
        assert np.allclose(model.distribution(), dist)


def test_dual_bound_is_non_decreasing(rng):
    n = 15
    U = _random_margins(rng, n, 8)
    model = LPModel()
    model.initialize(n, 1.0 / 3.0)
    dist = np.full(n, 1.0 / n)
    previous = -np.inf
    for j in range(U.shape[1]):
        dist, gamma = model.update(dist, U[:, j])
        assert gamma >= previous - 1e-9
        previous = gamma


def test_initialize_resets_columns():
    model = LPModel()
    model.initialize(3, 1.0)
    model.update(np.full(3, 1.0 / 3.0), np.array([1.0, -1.0, 1.0]))
    model.initialize(3, 1.0)
    assert model.n_hypotheses == 0
    assert model.final_weights().shape == (0,)
    assert np.allclose(model.distribution(), np.full(3, 1.0 / 3.0))
