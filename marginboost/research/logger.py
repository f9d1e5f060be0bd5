"""Per-round experiment logging for boosting runs."""

from __future__ import annotations

import csv
import time
from dataclasses import dataclass, field
from os import PathLike
from typing import Callable, List, Optional, Protocol

from ..booster.core import EngineState, MarginBoostingEngine
from ..errors import ConfigurationError
from ..hypothesis import Classifier, WeakLearner, WeightedMajority
from ..logging import get_logger
from ..sample import Sample
from ..utils import margins_of_hypothesis, soft_margin_objective, zero_one_loss

logger = get_logger(__name__)

HEADER = ("ObjectiveValue", "TrainLoss", "TestLoss", "Time")

ObjectiveFunction = Callable[[Sample, Classifier], float]
LossFunction = Callable[[Sample, Classifier], float]


@dataclass
class RoundRecord:
    """
    Metrics recorded after each boosting round.

    Args:
        round: Round number (1-indexed).
        objective: Objective value of the current combined hypothesis on the
            training sample.
        train_loss: Loss on the training sample.
        test_loss: Loss on the test sample.
        time_ms: Cumulative time spent inside ``boost``, in milliseconds.
    """

    round: int
    objective: float
    train_loss: float
    test_loss: float
    time_ms: float


@dataclass
class RunHistory:
    """Accumulated per-round metrics of a logged run."""

    rounds: List[RoundRecord] = field(default_factory=list)
    timed_out: bool = False

    def record(self, info: RoundRecord) -> None:
        self.rounds.append(info)

    def best_objective(self) -> Optional[float]:
        """Largest objective value recorded, or None before the first round."""
        if not self.rounds:
            return None
        return max(r.objective for r in self.rounds)

    def final_objective(self) -> Optional[float]:
        if not self.rounds:
            return None
        return self.rounds[-1].objective

    def num_rounds(self) -> int:
        return len(self.rounds)


class RoundCallback(Protocol):
    """Callable invoked with the :class:`RoundRecord` of every round."""

    def __call__(self, info: RoundRecord) -> None:
        ...


class SoftMarginObjective:
    """Soft margin objective of a combined hypothesis for a fixed ``nu``."""

    def __init__(self, nu: float) -> None:
        self.nu = float(nu)

    @property
    def name(self) -> str:
        return f"Soft margin (nu={self.nu:g})"

    def __call__(self, sample: Sample, hypothesis: Classifier) -> float:
        return soft_margin_objective(margins_of_hypothesis(sample, hypothesis), self.nu)


class BoostingLogger:
    """
    Runs a booster round by round and records objective, losses and time.

    Args:
        booster: Engine to run.
        weak_learner: Oracle passed to every round.
        train: Training sample; the booster's own sample is used if None.
        test: Held-out sample for the test loss; defaults to ``train``.
        objective: ``f(sample, hypothesis)`` evaluated on ``train``. Defaults
            to the soft margin objective with the booster's ``nu``.
        loss: ``f(sample, hypothesis)`` evaluated on both samples. Defaults
            to the 0/1 error.

    Attributes:
        history: Records of the last :meth:`run`.
    """

    def __init__(
        self,
        booster: MarginBoostingEngine,
        weak_learner: WeakLearner,
        train: Optional[Sample] = None,
        test: Optional[Sample] = None,
        objective: Optional[ObjectiveFunction] = None,
        loss: Optional[LossFunction] = None,
    ) -> None:
        self.booster = booster
        self.weak_learner = weak_learner
        self.train = booster.sample if train is None else train
        self.test = self.train if test is None else test
        self.objective = objective
        self.loss = zero_one_loss if loss is None else loss
        self.history = RunHistory()

    def _objective(self) -> ObjectiveFunction:
        if self.objective is not None:
            return self.objective
        return SoftMarginObjective(self.booster.nu)

    def _log_stats(self, objective: ObjectiveFunction, time_limit: Optional[float]) -> None:
        limit = "none" if time_limit is None else f"{time_limit:g} s"
        logger.info(
            "booster=%s weak_learner=%s objective=%s time_limit=%s",
            self.booster.name,
            self.weak_learner.name,
            getattr(objective, "name", getattr(objective, "__name__", repr(objective))),
            limit,
        )
        for key, value in self.booster.info():
            logger.info("%s: %s", key, value)

    def run(
        self,
        output: Optional[str | PathLike[str]] = None,
        max_rounds: Optional[int] = None,
        time_limit: Optional[float] = None,
        print_every: Optional[int] = 100,
        callbacks: Optional[List[RoundCallback]] = None,
    ) -> tuple[WeightedMajority, RunHistory]:
        """
        Run the booster to termination with per-round logging.

        Args:
            output: CSV file receiving one row per round under the header
                ``ObjectiveValue,TrainLoss,TestLoss,Time``. Nothing is written
                if None.
            max_rounds: Round budget. Required when the booster has no
                intrinsic round limit.
            time_limit: Stop once the cumulative boosting time exceeds this
                many seconds.
            print_every: Log progress every this many rounds; None disables it.
            callbacks: Invoked with each :class:`RoundRecord`.

        Returns:
            The postprocessed combined hypothesis and the run history.

        Raises:
            ConfigurationError: If no round budget is available.
            OptimizerInfeasible: If the optimizer fails. As in
                :meth:`MarginBoostingEngine.run`, the booster discards its
                hypothesis history first.
        """
        callbacks = callbacks or []
        objective = self._objective()
        self.history = RunHistory()

        self.booster.preprocess()
        if max_rounds is None and self.booster.round_limit is None:
            raise ConfigurationError(f"{self.booster.name} needs max_rounds when logged.")
        self._log_stats(objective, time_limit)

        handle = None
        writer = None
        if output is not None:
            handle = open(output, "w", newline="")
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(HEADER)

        elapsed_ms = 0.0
        iteration = 0
        try:
            while max_rounds is None or iteration < max_rounds:
                iteration += 1
                start = time.perf_counter()
                state = self.booster.boost(self.weak_learner, iteration)
                elapsed_ms += (time.perf_counter() - start) * 1000.0

                hypothesis = self.booster.current_hypothesis()
                info = RoundRecord(
                    round=iteration,
                    objective=float(objective(self.train, hypothesis)),
                    train_loss=float(self.loss(self.train, hypothesis)),
                    test_loss=float(self.loss(self.test, hypothesis)),
                    time_ms=elapsed_ms,
                )
                self.history.record(info)
                if writer is not None:
                    writer.writerow([info.objective, info.train_loss, info.test_loss, info.time_ms])
                for cb in callbacks:
                    cb(info)

                if time_limit is not None and elapsed_ms > time_limit * 1000.0:
                    self.history.timed_out = True
                    logger.warning("[TLE] round %d: %s", iteration, _format_record(info))
                    break
                if print_every is not None and iteration % print_every == 0:
                    logger.info("[LOG] round %d: %s", iteration, _format_record(info))
                if state is EngineState.TERMINATED:
                    logger.info("[FIN] round %d: %s", iteration, _format_record(info))
                    break
            hypothesis = self.booster.postprocess()
        except Exception:
            self.booster.abort()
            raise
        finally:
            if handle is not None:
                handle.close()

        return hypothesis, self.history


def _format_record(info: RoundRecord) -> str:
    return (
        f"objective={info.objective:.6f} train={info.train_loss:.6f} "
        f"test={info.test_loss:.6f} time={info.time_ms:.0f} ms"
    )


__all__ = [
    "HEADER",
    "RoundRecord",
    "RunHistory",
    "RoundCallback",
    "SoftMarginObjective",
    "BoostingLogger",
]
