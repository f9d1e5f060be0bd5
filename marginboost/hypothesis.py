"""
Hypotheses, weak learners and the combined weighted-majority model.

Boosters are written against two small capabilities: a :class:`Classifier`
maps a sample to real-valued confidences (its sign is the predicted label),
and a :class:`WeakLearner` returns a classifier for a sample weighting.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Iterator, Sequence

import numpy as np

from .sample import Sample


class Classifier(ABC):
    """Real-valued binary classifier; ``predict`` is the sign of ``confidence``."""

    @abstractmethod
    def confidence_all(self, sample: Sample) -> np.ndarray:
        """Return the confidence for every example of ``sample``."""

    def confidence(self, sample: Sample, row: int) -> float:
        return float(self.confidence_all(sample)[row])

    def predict_all(self, sample: Sample) -> np.ndarray:
        """Return labels in ``{-1, +1}``; zero confidence maps to ``+1``."""
        confidence = np.asarray(self.confidence_all(sample), dtype=float)
        return np.where(confidence >= 0.0, 1, -1)

    def predict(self, sample: Sample, row: int) -> int:
        return 1 if self.confidence(sample, row) >= 0.0 else -1

    def clone(self) -> "Classifier":
        return copy.deepcopy(self)


class WeakLearner(ABC):
    """Oracle returning a hypothesis with (approximately) maximal edge."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def produce(self, sample: Sample, dist: np.ndarray) -> Classifier:
        """
        Return a hypothesis for the weighting ``dist``.

        ``dist`` is any non-negative vector summing to one; implementations
        must not modify it.
        """


class WeightedMajority(Classifier):
    """
    Finalized convex combination of hypotheses.

    Holds only pairs with non-zero weight. Instances are immutable: weights
    and hypotheses are stored as tuples and the weight array handed out by
    :attr:`weights` is a read-only copy.
    """

    def __init__(self, weights: Sequence[float], hypotheses: Sequence[Classifier]) -> None:
        if len(weights) != len(hypotheses):
            raise ValueError(
                f"Got {len(weights)} weights for {len(hypotheses)} hypotheses."
            )
        self._weights = tuple(float(w) for w in weights)
        self._hypotheses = tuple(hypotheses)

    @property
    def weights(self) -> np.ndarray:
        out = np.array(self._weights, dtype=float)
        out.setflags(write=False)
        return out

    @property
    def hypotheses(self) -> tuple[Classifier, ...]:
        return self._hypotheses

    def confidence_all(self, sample: Sample) -> np.ndarray:
        total = np.zeros(sample.n_examples)
        for weight, hypothesis in self:
            total += weight * np.asarray(hypothesis.confidence_all(sample), dtype=float)
        return total

    def __iter__(self) -> Iterator[tuple[float, Classifier]]:
        return iter(zip(self._weights, self._hypotheses))

    def __len__(self) -> int:
        return len(self._hypotheses)

    def __repr__(self) -> str:
        return f"WeightedMajority(n_hypotheses={len(self)}, total_weight={sum(self._weights):.6f})"


def combine_hypotheses(
    weights: Sequence[float] | np.ndarray,
    hypotheses: Sequence[Classifier],
) -> WeightedMajority:
    """
    Package ``(weight, hypothesis)`` pairs into a :class:`WeightedMajority`.

    Zero-weight pairs are dropped. The remaining weights are kept as given:
    the dropped mass is zero, so no re-normalization takes place.

    Raises:
        ValueError: If the lengths differ or a weight is negative.
    """
    weights = np.asarray(weights, dtype=float).reshape(-1)
    if weights.shape[0] != len(hypotheses):
        raise ValueError(
            f"Got {weights.shape[0]} weights for {len(hypotheses)} hypotheses."
        )
    if np.any(weights < 0.0):
        raise ValueError("Combined hypothesis weights must be non-negative.")
    kept = [(float(w), h) for w, h in zip(weights, hypotheses) if w != 0.0]
    return WeightedMajority([w for w, _ in kept], [h for _, h in kept])


__all__ = ["Classifier", "WeakLearner", "WeightedMajority", "combine_hypotheses"]
