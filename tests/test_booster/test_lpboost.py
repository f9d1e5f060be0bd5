import numpy as np
import pytest

from marginboost.booster import EngineState, LPBoost
from marginboost.hypothesis import Classifier, WeakLearner
from marginboost.sample import Sample
from marginboost.utils import margins_of_hypothesis, soft_margin_objective
from marginboost.weak_learner import DecisionStump


class ScaledLabels(Classifier):
    def __init__(self, scale):
        self.scale = scale

    def confidence_all(self, sample):
        return self.scale * sample.target


class ConstantEdgeLearner(WeakLearner):
    def __init__(self, edge):
        self.edge = edge

    def produce(self, sample, dist):
        return ScaledLabels(self.edge)


def test_constant_edge_terminates_in_first_round():
    X = np.arange(10, dtype=float).reshape(-1, 1)
    y = np.where(np.arange(10) < 5, 1.0, -1.0)
    booster = LPBoost(Sample.from_arrays(X, y), tolerance=0.05, nu=1.0)
    result = booster.run(ConstantEdgeLearner(0.3), max_rounds=10)

    assert result.converged is True
    assert result.terminated == 1
    assert result.primal_bound == pytest.approx(0.3)
    assert result.dual_bound == pytest.approx(0.3, abs=1e-9)
    assert len(result.hypothesis) == 1
    assert np.allclose(result.hypothesis.weights, [1.0])


def test_separable_sample_uses_single_stump(separable_sample):
    booster = LPBoost(separable_sample, tolerance=1e-6)
    result = booster.run(DecisionStump(), max_rounds=20)
    assert result.converged is True
    assert result.terminated == 1
    assert np.array_equal(result.hypothesis.predict_all(separable_sample), separable_sample.target)


def test_capping_bounds_every_distribution(noisy_sample):
    booster = LPBoost(noisy_sample, tolerance=1e-3, nu=5.0)
    booster.preprocess()
    learner = DecisionStump()
    for it in range(1, 31):
        state = booster.boost(learner, it)
        assert np.max(booster.distribution) <= 0.2 + 1e-9
        assert pytest.approx(1.0, abs=1e-9) == np.sum(booster.distribution)
        if state is EngineState.TERMINATED:
            break


def test_converged_run_solves_soft_margin_problem(noisy_sample):
    nu = 5.0
    booster = LPBoost(noisy_sample, tolerance=0.01, nu=nu)
    result = booster.run(DecisionStump(), max_rounds=400)
    assert result.converged is True
    assert result.dual_bound >= result.primal_bound - 0.01

    weights = result.hypothesis.weights
    assert np.all(weights > 0.0)
    assert pytest.approx(1.0, abs=1e-9) == np.sum(weights)
    margins = margins_of_hypothesis(noisy_sample, result.hypothesis)
    # strong duality over the generated columns
    assert soft_margin_objective(margins, nu) == pytest.approx(result.dual_bound, abs=1e-6)


def test_termination_round_matches_gap(noisy_sample):
    booster = LPBoost(noisy_sample, tolerance=0.02, nu=4.0)
    booster.preprocess()
    learner = DecisionStump()
    for it in range(1, 401):
        state = booster.boost(learner, it)
        gap = booster.primal_bound - booster.dual_bound
        if state is EngineState.TERMINATED:
            assert gap <= 0.02
            assert booster.terminated == it
            break
        assert gap > 0.02
    else:
        pytest.fail("LPBoost did not converge on a finite stump class")
    assert len(booster.hypotheses) == booster.terminated
