"""
Margin-maximizing boosting engine.

The engine runs the round loop shared by the column-generation boosters:

1. the weak learner produces a hypothesis for the current distribution;
2. the primal bound (best upper estimate of the optimal value) is lowered to
   the value of that hypothesis;
3. the distribution optimizer re-solves over all hypotheses, returning a new
   distribution and the dual bound;
4. the run stops once ``primal_bound - dual_bound`` falls under the
   variant's threshold.

Everything a variant changes (the value fed into the primal bound, the
optimizer, whether the certificate is checked before or after the update,
the threshold and an optional intrinsic round limit) lives in a
:class:`RoundUpdate` strategy.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..errors import ConfigurationError
from ..hypothesis import Classifier, WeakLearner, WeightedMajority, combine_hypotheses
from ..logging import get_logger
from ..sample import Sample
from ..solvers.base import DistributionOptimizer
from ..utils import check_nu, check_tolerance, format_unit, margins_of_hypothesis

logger = get_logger(__name__)


class EngineState(Enum):
    """Lifecycle of a boosting run."""

    INITIALIZED = "initialized"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class ConvergenceTracker:
    """
    Primal and dual bounds of the current run.

    ``primal_bound`` only ever decreases; ``dual_bound`` is whatever the
    optimizer certified last.
    """

    primal_bound: float = 1.0
    dual_bound: float = float("-inf")

    def reset(self) -> None:
        self.primal_bound = 1.0
        self.dual_bound = float("-inf")

    def observe_primal(self, value: float) -> float:
        self.primal_bound = min(self.primal_bound, float(value))
        return self.primal_bound

    def observe_dual(self, value: float) -> None:
        self.dual_bound = float(value)

    def gap(self) -> float:
        return self.primal_bound - self.dual_bound

    def is_converged(self, threshold: float) -> bool:
        return self.gap() <= threshold


class RoundUpdate(ABC):
    """Variant-specific part of a boosting round."""

    name = "RoundUpdate"
    requires_binary_labels = True
    certify_before_update = False

    def configure(self, n_sample: int, nu: float, tolerance: float) -> None:
        """Derive run constants from validated parameters."""

    @abstractmethod
    def make_optimizer(self, n_sample: int, upper_bound: float) -> DistributionOptimizer:
        """Return an initialized optimizer owned by a single run."""

    @abstractmethod
    def primal_value(self, margins: np.ndarray, dist: np.ndarray) -> float:
        """Value of the newest hypothesis fed into the primal bound."""

    @abstractmethod
    def threshold(self, tolerance: float) -> float:
        """Gap below which the run is certified optimal."""

    def round_limit(self, n_sample: int, nu: float, tolerance: float) -> Optional[int]:
        """Intrinsic bound on the number of rounds, if the variant has one."""
        return None


@dataclass(frozen=True)
class BoostingResult:
    """
    Outcome of :meth:`MarginBoostingEngine.run`.

    Attributes:
        hypothesis: The combined hypothesis.
        terminated: Round at which the run stopped.
        converged: True if the primal-dual gap certificate was met; False if
            the run hit a round limit or the caller's budget.
        primal_bound: Final primal bound.
        dual_bound: Final dual bound.
    """

    hypothesis: WeightedMajority
    terminated: int
    converged: bool
    primal_bound: float
    dual_bound: float


class MarginBoostingEngine:
    """
    Boosting engine parameterized by a :class:`RoundUpdate`.

    Args:
        sample: Training sample, borrowed for the lifetime of the engine.
        update: Strategy implementing the variant.
        tolerance: Accuracy parameter, defaults to ``1 / n``.
        nu: Capping parameter in ``[1, n]``; ``1`` means no capping.

    Raises:
        ConfigurationError: If ``nu`` or ``tolerance`` is out of range.
    """

    def __init__(
        self,
        sample: Sample,
        update: RoundUpdate,
        tolerance: Optional[float] = None,
        nu: float = 1.0,
    ) -> None:
        self.sample = sample
        self._update = update
        n_sample = sample.n_examples
        self._tolerance = 1.0 / n_sample if tolerance is None else float(tolerance)
        self._nu = float(nu)
        check_nu(self._nu, n_sample)
        check_tolerance(self._tolerance)

        self._state: Optional[EngineState] = None
        self._dist = np.full(n_sample, 1.0 / n_sample)
        self._hypotheses: list[Classifier] = []
        self._tracker = ConvergenceTracker()
        self._optimizer: Optional[DistributionOptimizer] = None
        self._round_limit: Optional[int] = None
        self._converged = False
        self.terminated: Optional[int] = None

    # ------------------------------------------------------------------
    # Parameters

    @property
    def name(self) -> str:
        return self._update.name

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def nu(self) -> float:
        return self._nu

    def _check_not_running(self, what: str) -> None:
        if self._state is EngineState.RUNNING:
            raise ConfigurationError(
                f"Cannot change {what} while a run is in progress; call preprocess again."
            )

    def set_nu(self, nu: float) -> "MarginBoostingEngine":
        """Set the capping parameter; takes effect at the next :meth:`preprocess`."""
        self._check_not_running("nu")
        check_nu(float(nu), self.sample.n_examples)
        self._nu = float(nu)
        return self

    def set_tolerance(self, tolerance: float) -> "MarginBoostingEngine":
        """Set the accuracy parameter; takes effect at the next :meth:`preprocess`."""
        self._check_not_running("tolerance")
        check_tolerance(float(tolerance))
        self._tolerance = float(tolerance)
        return self

    # ------------------------------------------------------------------
    # Run state

    @property
    def state(self) -> Optional[EngineState]:
        return self._state

    @property
    def distribution(self) -> np.ndarray:
        return self._dist.copy()

    @property
    def hypotheses(self) -> tuple[Classifier, ...]:
        return tuple(self._hypotheses)

    @property
    def primal_bound(self) -> float:
        return self._tracker.primal_bound

    @property
    def dual_bound(self) -> float:
        return self._tracker.dual_bound

    @property
    def round_limit(self) -> Optional[int]:
        return self._round_limit

    @property
    def converged(self) -> bool:
        return self._converged

    def info(self) -> list[tuple[str, str]]:
        """Human-readable run parameters."""
        n_sample, n_feature = self.sample.shape()
        ratio = self._nu * 100.0 / n_sample
        limit = "-" if self._round_limit is None else str(self._round_limit)
        return [
            ("# of examples", str(n_sample)),
            ("# of features", str(n_feature)),
            ("Tolerance", f"{self._tolerance}"),
            ("Max iteration", limit),
            ("Capping (outliers)", f"{format_unit(self._nu)} ({ratio:>7.3f} %)"),
        ]

    # ------------------------------------------------------------------
    # Boosting protocol

    def preprocess(self) -> None:
        """
        Validate the configuration and reset all run state.

        Safe to call repeatedly: every call restores the uniform distribution,
        clears the hypothesis history and builds a fresh optimizer.

        Raises:
            ConfigurationError: On invalid parameters or labels.
        """
        n_sample, _ = self.sample.shape()
        if n_sample < 1:
            raise ConfigurationError("Cannot boost on an empty sample.")
        if self._update.requires_binary_labels and not self.sample.is_valid_binary_instance():
            raise ConfigurationError(f"{self.name} requires labels in {{-1, +1}}.")
        check_nu(self._nu, n_sample)
        check_tolerance(self._tolerance)
        self._update.configure(n_sample, self._nu, self._tolerance)

        self._dist = np.full(n_sample, 1.0 / n_sample)
        self._hypotheses = []
        self._tracker.reset()
        self._optimizer = self._update.make_optimizer(n_sample, 1.0 / self._nu)
        self._round_limit = self._update.round_limit(n_sample, self._nu, self._tolerance)
        self._converged = False
        self.terminated = None
        self._state = EngineState.INITIALIZED
        logger.info(
            "%s initialized: n=%d, nu=%s, tolerance=%g, round limit=%s",
            self.name,
            n_sample,
            self._nu,
            self._tolerance,
            self._round_limit,
        )

    def _terminate(self, iteration: int, converged: bool) -> EngineState:
        self.terminated = iteration
        self._converged = converged
        self._state = EngineState.TERMINATED
        logger.info(
            "%s terminated at round %d (%s): primal=%.6f dual=%.6f",
            self.name,
            iteration,
            "converged" if converged else "round limit",
            self._tracker.primal_bound,
            self._tracker.dual_bound,
        )
        return self._state

    def boost(self, weak_learner: WeakLearner, iteration: int) -> EngineState:
        """
        Run round ``iteration`` (1-based).

        Returns:
            ``EngineState.RUNNING`` to continue or ``EngineState.TERMINATED``.

        Raises:
            ConfigurationError: If :meth:`preprocess` has not been called.
            OptimizerInfeasible: If the optimizer fails.
        """
        if self._state is None or self._optimizer is None:
            raise ConfigurationError("preprocess() must be called before boost().")
        if self._state is EngineState.TERMINATED:
            return self._state
        self._state = EngineState.RUNNING

        if self._round_limit is not None and iteration > self._round_limit:
            return self._terminate(self._round_limit, converged=False)

        hypothesis = weak_learner.produce(self.sample, self._dist.copy())
        margins = margins_of_hypothesis(self.sample, hypothesis)
        self._tracker.observe_primal(self._update.primal_value(margins, self._dist))
        threshold = self._update.threshold(self._tolerance)

        if self._update.certify_before_update and self._tracker.is_converged(threshold):
            return self._terminate(iteration, converged=True)

        dist, dual_bound = self._optimizer.update(self._dist, margins)
        self._hypotheses.append(hypothesis)
        self._dist = dist
        self._tracker.observe_dual(dual_bound)
        logger.debug(
            "%s round %d: primal=%.6f dual=%.6f gap=%.3e",
            self.name,
            iteration,
            self._tracker.primal_bound,
            self._tracker.dual_bound,
            self._tracker.gap(),
        )

        if not self._update.certify_before_update and self._tracker.is_converged(threshold):
            return self._terminate(iteration, converged=True)
        return self._state

    def current_hypothesis(self) -> WeightedMajority:
        """Combined hypothesis of the rounds run so far."""
        if self._optimizer is None:
            raise ConfigurationError("preprocess() must be called first.")
        weights = self._optimizer.final_weights()
        if weights.shape[0] != len(self._hypotheses):
            raise RuntimeError(
                f"Optimizer holds {weights.shape[0]} weights for "
                f"{len(self._hypotheses)} hypotheses."
            )
        return combine_hypotheses(weights, [h.clone() for h in self._hypotheses])

    def postprocess(self) -> WeightedMajority:
        """Assemble the final combined hypothesis."""
        return self.current_hypothesis()

    def abort(self) -> None:
        """Discard the hypothesis history and optimizer of a failed run."""
        self._hypotheses = []
        self._optimizer = None
        self._state = None

    def run(self, weak_learner: WeakLearner, max_rounds: Optional[int] = None) -> BoostingResult:
        """
        Run the full boosting loop.

        Args:
            weak_learner: Oracle producing one hypothesis per round.
            max_rounds: External round budget. Mandatory for variants without
                an intrinsic round limit, which may otherwise never stop.

        Raises:
            ConfigurationError: On invalid configuration or a missing budget.
            OptimizerInfeasible: If the optimizer fails. The hypothesis
                history is discarded before the error propagates.
        """
        if max_rounds is not None and max_rounds < 0:
            raise ConfigurationError("max_rounds must be non-negative.")
        self.preprocess()
        if max_rounds is None and self._round_limit is None:
            raise ConfigurationError(
                f"{self.name} has no intrinsic round limit; pass max_rounds."
            )

        last_round = 0
        try:
            for iteration in itertools.count(1):
                if max_rounds is not None and iteration > max_rounds:
                    break
                state = self.boost(weak_learner, iteration)
                last_round = iteration
                if state is EngineState.TERMINATED:
                    break
            hypothesis = self.postprocess()
        except Exception:
            self.abort()
            raise

        if self._state is not EngineState.TERMINATED:
            logger.info("%s exhausted its budget of %d rounds", self.name, last_round)
            self._terminate(last_round, converged=False)

        return BoostingResult(
            hypothesis=hypothesis,
            terminated=int(self.terminated if self.terminated is not None else last_round),
            converged=self._converged,
            primal_bound=self._tracker.primal_bound,
            dual_bound=self._tracker.dual_bound,
        )


__all__ = [
    "EngineState",
    "ConvergenceTracker",
    "RoundUpdate",
    "BoostingResult",
    "MarginBoostingEngine",
]
