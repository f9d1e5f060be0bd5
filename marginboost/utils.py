"""
Numeric helpers shared by boosters, optimizers and the research logger.

The *margin* of a hypothesis ``h`` on example ``i`` is ``y_i h(x_i)`` and its
*edge* under a distribution ``d`` is ``sum_i d_i y_i h(x_i)``. Entropies are
measured relative to the uniform distribution, i.e.
``sum_i d_i ln(n d_i)``, which is zero exactly at the uniform distribution.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .hypothesis import Classifier
    from .sample import Sample


def margins_of_hypothesis(sample: "Sample", hypothesis: "Classifier") -> np.ndarray:
    """Return the vector ``y_i h(x_i)`` for every example."""
    confidence = np.asarray(hypothesis.confidence_all(sample), dtype=float).reshape(-1)
    if confidence.shape[0] != sample.n_examples:
        raise ValueError(
            f"Hypothesis returned {confidence.shape[0]} confidences for "
            f"{sample.n_examples} examples."
        )
    return sample.target * confidence


def edge_from_margins(margins: np.ndarray, dist: np.ndarray) -> float:
    """Weighted edge ``d . margins``."""
    return float(np.dot(dist, margins))


def edge_of_hypothesis(sample: "Sample", dist: np.ndarray, hypothesis: "Classifier") -> float:
    """Weighted edge of ``hypothesis`` under ``dist``."""
    return edge_from_margins(margins_of_hypothesis(sample, hypothesis), dist)


def entropy_from_uni_distribution(dist: np.ndarray) -> float:
    """
    Relative entropy of ``dist`` to the uniform distribution.

    Zero entries contribute nothing (``0 ln 0 = 0``).
    """
    dist = np.asarray(dist, dtype=float)
    n = dist.shape[0]
    positive = dist[dist > 0.0]
    return float(np.sum(positive * np.log(n * positive)))


def check_nu(nu: float, n_sample: int) -> None:
    """Raise unless the capping parameter lies in ``[1, n_sample]``."""
    if not (math.isfinite(nu) and 1.0 <= nu <= float(n_sample)):
        raise ConfigurationError(
            f"Capping parameter nu must be in [1, {n_sample}], got {nu}."
        )


def check_tolerance(tolerance: float) -> None:
    """Raise unless ``tolerance`` is a positive finite number."""
    if not (math.isfinite(tolerance) and tolerance > 0.0):
        raise ConfigurationError(f"Tolerance must be positive, got {tolerance}.")


def is_capped_distribution(dist: np.ndarray, upper_bound: float, atol: float = 1e-9) -> bool:
    """Return True if ``dist`` lies on the simplex with entries <= ``upper_bound``."""
    dist = np.asarray(dist, dtype=float)
    return bool(
        abs(float(np.sum(dist)) - 1.0) <= atol * max(1, dist.shape[0])
        and np.all(dist >= -atol)
        and np.all(dist <= upper_bound + atol)
    )


def soft_margin_objective(margins: np.ndarray, nu: float) -> float:
    """
    Soft margin optimization objective of a combined hypothesis.

    Evaluates ``max_rho rho - (1/nu) sum_i max(0, rho - m_i)``, which by LP
    duality equals the average of the ``nu`` smallest margins: the minimum of
    ``d . m`` over distributions capped at ``1/nu``.
    """
    margins = np.sort(np.asarray(margins, dtype=float).reshape(-1))
    n = margins.shape[0]
    check_nu(nu, n)
    cap = 1.0 / nu
    weights = np.zeros(n)
    full = min(int(math.floor(nu)), n)
    weights[:full] = cap
    remainder = 1.0 - full * cap
    if full < n and remainder > 0.0:
        weights[full] = remainder
    return float(weights @ margins)


def zero_one_loss(sample: "Sample", hypothesis: "Classifier") -> float:
    """Fraction of examples whose predicted label differs from the target."""
    predictions = np.asarray(hypothesis.predict_all(sample))
    return float(np.mean(predictions != sample.target))


def format_unit(value: float) -> str:
    """Format a positive quantity with a metric suffix (``12.5K``)."""
    for threshold, suffix in ((1e9, "G"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return f"{value:g}"


__all__ = [
    "margins_of_hypothesis",
    "edge_from_margins",
    "edge_of_hypothesis",
    "entropy_from_uni_distribution",
    "check_nu",
    "check_tolerance",
    "is_capped_distribution",
    "soft_margin_objective",
    "zero_one_loss",
    "format_unit",
]
