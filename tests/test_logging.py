"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np
import pytest

from marginboost.booster import ERLPBoost, LPBoost
from marginboost.logging import configure_logging, get_logger
from marginboost.sample import Sample
from marginboost.weak_learner import DecisionStump


def _two_point_sample():
    return Sample.from_arrays(np.array([[0.0], [1.0]]), np.array([-1.0, 1.0]))


def test_loggers_live_under_package_namespace():
    logger = get_logger("solver_tests")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "marginboost.solver_tests"
    assert get_logger("marginboost.booster.core").name == "marginboost.booster.core"
    assert get_logger().name == "marginboost"


def test_package_logger_owns_the_only_handler():
    package = get_logger()
    child = get_logger("solver_tests")
    assert get_logger("solver_tests") is child
    assert child.handlers == []
    assert child.parent is package
    assert len(package.handlers) == 1
    assert package.propagate is False


def test_configure_logging_accepts_names_and_ints():
    logger = get_logger("level_tests")
    try:
        configure_logging("debug")
        assert logger.getEffectiveLevel() == logging.DEBUG
        configure_logging(logging.ERROR)
        assert logger.getEffectiveLevel() == logging.ERROR
        assert len(get_logger().handlers) == 1
        with pytest.raises(ValueError):
            configure_logging("chatty")
    finally:
        configure_logging(level=logging.WARNING)


def test_configure_logging_redirects_output():
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream, format_string="%(name)s|%(message)s")
    try:
        get_logger("format_tests").debug("Round finished")
        assert "marginboost.format_tests|Round finished" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_booster_reports_initialization_and_termination():
    stream = StringIO()
    configure_logging(level=logging.INFO, stream=stream)
    try:
        LPBoost(_two_point_sample()).run(DecisionStump(), max_rounds=5)
        output = stream.getvalue()
        assert "[INFO] marginboost.booster.core: LPBoost initialized" in output
        assert "terminated at round 1 (converged)" in output
    finally:
        configure_logging(level=logging.WARNING)


def test_round_bounds_logged_at_debug_only():
    stream = StringIO()
    configure_logging(level=logging.INFO, stream=stream)
    try:
        ERLPBoost(_two_point_sample(), tolerance=0.5).run(DecisionStump())
        assert "round 1: primal" not in stream.getvalue()

        configure_logging(level=logging.DEBUG, stream=stream)
        ERLPBoost(_two_point_sample(), tolerance=0.5).run(DecisionStump())
        assert "ERLPBoost round 1: primal" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)
