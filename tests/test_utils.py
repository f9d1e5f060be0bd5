import math

import numpy as np
import pytest

from marginboost.errors import ConfigurationError
from marginboost.hypothesis import Classifier
from marginboost.sample import Sample
from marginboost.utils import (
    check_nu,
    check_tolerance,
    edge_from_margins,
    edge_of_hypothesis,
    entropy_from_uni_distribution,
    format_unit,
    is_capped_distribution,
    margins_of_hypothesis,
    soft_margin_objective,
    zero_one_loss,
)


class Fixed(Classifier):
    def __init__(self, confidence):
        self.confidence_values = np.asarray(confidence, dtype=float)

    def confidence_all(self, sample):
        return self.confidence_values


@pytest.fixture
def sample():
    return Sample.from_arrays(np.zeros((4, 1)), np.array([1.0, -1.0, 1.0, -1.0]))


def test_margins_and_edges(sample):
    h = Fixed([1.0, 1.0, -1.0, -1.0])
    margins = margins_of_hypothesis(sample, h)
    assert np.array_equal(margins, [1.0, -1.0, -1.0, 1.0])
    dist = np.array([0.4, 0.1, 0.1, 0.4])
    assert edge_from_margins(margins, dist) == pytest.approx(0.6)
    assert edge_of_hypothesis(sample, dist, h) == pytest.approx(0.6)
    assert zero_one_loss(sample, h) == pytest.approx(0.5)


def test_margins_reject_wrong_length(sample):
    with pytest.raises(ValueError):
        margins_of_hypothesis(sample, Fixed([1.0, 1.0]))


def test_entropy_relative_to_uniform():
    assert entropy_from_uni_distribution(np.full(5, 0.2)) == pytest.approx(0.0, abs=1e-15)
    # zero entries contribute nothing
    assert entropy_from_uni_distribution(np.array([1.0, 0.0, 0.0, 0.0])) == pytest.approx(math.log(4.0))
    assert entropy_from_uni_distribution(np.array([0.5, 0.5, 0.0, 0.0])) == pytest.approx(math.log(2.0))


def test_check_nu_and_tolerance():
    check_nu(1.0, 5)
    check_nu(5.0, 5)
    for nu in (0.99, 5.01, math.inf, math.nan):
        with pytest.raises(ConfigurationError):
            check_nu(nu, 5)
    check_tolerance(1e-6)
    for tol in (0.0, -1.0, math.nan):
        with pytest.raises(ConfigurationError):
            check_tolerance(tol)


def test_is_capped_distribution():
    assert is_capped_distribution(np.full(4, 0.25), 0.25)
    assert not is_capped_distribution(np.array([0.5, 0.5, 0.0, 0.0]), 0.25)
    assert not is_capped_distribution(np.array([0.3, 0.3, 0.3]), 1.0)


def test_soft_margin_objective_averages_smallest_margins():
    margins = np.array([0.5, -1.0, 0.25, 1.0])
    assert soft_margin_objective(margins, 1.0) == pytest.approx(-1.0)
    assert soft_margin_objective(margins, 2.0) == pytest.approx((-1.0 + 0.25) / 2.0)
    # fractional nu puts the remaining mass on the next margin
    assert soft_margin_objective(margins, 2.5) == pytest.approx(0.4 * (-1.0 + 0.25) + 0.2 * 0.5)
    assert soft_margin_objective(margins, 4.0) == pytest.approx(np.mean(margins))


def test_format_unit():
    assert format_unit(5.0) == "5"
    assert format_unit(12500.0) == "12.5K"
    assert format_unit(2.0e6) == "2.0M"
