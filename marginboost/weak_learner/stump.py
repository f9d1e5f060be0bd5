"""
Decision stumps: single-feature threshold classifiers.

A stump predicts ``polarity`` when ``x[feature] >= threshold`` and
``-polarity`` otherwise. :class:`DecisionStump` searches every feature,
every midpoint between consecutive distinct values and both polarities for
the stump with the largest weighted edge. A threshold of ``-inf`` is the
constant hypothesis.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..hypothesis import Classifier, WeakLearner
from ..logging import get_logger
from ..sample import Sample

logger = get_logger(__name__)


class StumpClassifier(Classifier):
    """Threshold classifier on one feature."""

    def __init__(self, feature: int, threshold: float, polarity: int = 1) -> None:
        if polarity not in (-1, 1):
            raise ValueError(f"polarity must be -1 or +1, got {polarity}.")
        self.feature = int(feature)
        self.threshold = float(threshold)
        self.polarity = int(polarity)

    def confidence_all(self, sample: Sample) -> np.ndarray:
        column = sample.features[:, self.feature]
        return self.polarity * np.where(column >= self.threshold, 1.0, -1.0)

    def __repr__(self) -> str:
        return (
            f"StumpClassifier(feature={self.feature}, "
            f"threshold={self.threshold:g}, polarity={self.polarity:+d})"
        )


def _best_split(column: np.ndarray, weighted_target: np.ndarray) -> tuple[float, float, int]:
    """Return ``(edge, threshold, polarity)`` of the best stump on one column."""
    order = np.argsort(column, kind="stable")
    values = column[order]
    weights = weighted_target[order]
    total = float(weights.sum())
    # prefix[k]: weight of the k smallest values, all predicted -polarity
    prefix = np.concatenate([[0.0], np.cumsum(weights)[:-1]])

    candidates = np.flatnonzero(np.concatenate([[True], values[1:] > values[:-1]]))
    edges = total - 2.0 * prefix[candidates]
    best = int(np.argmax(np.abs(edges)))
    k = int(candidates[best])
    edge = float(edges[best])

    threshold = -np.inf if k == 0 else 0.5 * (values[k - 1] + values[k])
    polarity = 1 if edge >= 0.0 else -1
    return abs(edge), float(threshold), polarity


class DecisionStump(WeakLearner):
    """
    Exhaustive decision-stump weak learner.

    Args:
        features: Optional subset of feature indices to search.

    Ties are broken towards the lower feature index, then the lower
    threshold.
    """

    def __init__(self, features: Optional[list[int]] = None) -> None:
        self.features = None if features is None else [int(j) for j in features]

    def produce(self, sample: Sample, dist: np.ndarray) -> StumpClassifier:
        dist = np.asarray(dist, dtype=float).reshape(-1)
        if dist.shape[0] != sample.n_examples:
            raise ValueError(
                f"Distribution has {dist.shape[0]} entries for {sample.n_examples} examples."
            )
        weighted_target = dist * sample.target
        features = range(sample.features.shape[1]) if self.features is None else self.features

        best: Optional[tuple[float, int, float, int]] = None
        for j in features:
            edge, threshold, polarity = _best_split(sample.features[:, j], weighted_target)
            if best is None or edge > best[0]:
                best = (edge, j, threshold, polarity)
        if best is None:
            raise ValueError("DecisionStump needs at least one feature.")

        edge, feature, threshold, polarity = best
        logger.debug(
            "Stump on feature %d at %g (polarity %+d), edge=%.6f",
            feature,
            threshold,
            polarity,
            edge,
        )
        return StumpClassifier(feature, threshold, polarity)


__all__ = ["StumpClassifier", "DecisionStump"]
