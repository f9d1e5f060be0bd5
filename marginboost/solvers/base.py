"""Interface shared by the distribution optimizers driven by boosters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..errors import ConfigurationError


class DistributionOptimizer(ABC):
    """
    Stateful solver that recomputes the example weighting after each round.

    The optimizer keeps the cumulative margin matrix ``U`` (one column
    ``y_i h_j(x_i)`` per hypothesis, in history order). Each call to
    :meth:`update` adds the newest column and re-solves over all columns.

    Attributes:
        n_sample: Number of examples ``n``.
        upper_bound: Cap ``1/nu`` on every entry of the distribution.
    """

    def __init__(self) -> None:
        self.n_sample = 0
        self.upper_bound = 1.0
        self._columns: list[np.ndarray] = []
        self._dist = np.zeros(0)
        self._weights = np.zeros(0)

    def _reset(self, n: int, upper_bound: float) -> None:
        if n < 1:
            raise ConfigurationError("The optimizer needs at least one example.")
        if not (0.0 < upper_bound <= 1.0) or n * upper_bound < 1.0 - 1e-12:
            raise ConfigurationError(
                f"Upper bound {upper_bound} leaves no distribution over {n} examples."
            )
        self.n_sample = int(n)
        self.upper_bound = float(upper_bound)
        self._columns = []
        self._dist = np.full(self.n_sample, 1.0 / self.n_sample)
        self._weights = np.zeros(0)

    def _append_margins(self, margins: np.ndarray) -> np.ndarray:
        if self.n_sample == 0:
            raise RuntimeError(f"{self.__class__.__name__} must be initialized before update.")
        column = np.asarray(margins, dtype=float).reshape(-1)
        if column.shape[0] != self.n_sample:
            raise ValueError(
                f"Expected {self.n_sample} margins, got {column.shape[0]}."
            )
        self._columns.append(column.copy())
        return self.margin_matrix

    @property
    def margin_matrix(self) -> np.ndarray:
        """Margins of all hypotheses so far, shape ``(n, n_hypotheses)``."""
        if not self._columns:
            return np.zeros((self.n_sample, 0))
        return np.column_stack(self._columns)

    @property
    def n_hypotheses(self) -> int:
        return len(self._columns)

    def distribution(self) -> np.ndarray:
        """Return the last committed distribution."""
        return self._dist.copy()

    def final_weights(self) -> np.ndarray:
        """Per-hypothesis weights, aligned with the order of :meth:`update` calls."""
        return self._weights.copy()

    @abstractmethod
    def initialize(self, n: int, upper_bound: float, eta: Optional[float] = None) -> None:
        """Reset the solver for ``n`` examples capped at ``upper_bound``."""

    @abstractmethod
    def update(self, dist: np.ndarray, margins: np.ndarray) -> tuple[np.ndarray, float]:
        """
        Add the newest hypothesis and re-solve.

        Args:
            dist: Distribution the newest hypothesis was produced against.
            margins: ``y_i h(x_i)`` of the newest hypothesis.

        Returns:
            The new distribution and the optimal (dual) objective value.

        Raises:
            OptimizerInfeasible: If the underlying solve does not succeed.
        """


__all__ = ["DistributionOptimizer"]
