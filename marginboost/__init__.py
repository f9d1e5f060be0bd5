"""marginboost - margin-maximizing boosting (LPBoost, ERLPBoost) on numpy and SciPy."""

__version__ = "0.1.0"

# Boosters
from .booster import (
    BoostingResult,
    ColumnGenerationUpdate,
    ConvergenceTracker,
    EngineState,
    EntropyRegularizedUpdate,
    ERLPBoost,
    LPBoost,
    MarginBoostingEngine,
    RoundUpdate,
)

# Errors
from .errors import ConfigurationError, OptimizerInfeasible

# Hypotheses
from .hypothesis import Classifier, WeakLearner, WeightedMajority, combine_hypotheses

# Logging
from .logging import configure_logging, get_logger

# Research
from .research import BoostingLogger, RoundRecord, RunHistory, SoftMarginObjective

# Data
from .sample import Sample

# Distribution optimizers
from .solvers import DistributionOptimizer, LPModel, QPModel

# Numeric helpers
from .utils import (
    edge_of_hypothesis,
    entropy_from_uni_distribution,
    margins_of_hypothesis,
    soft_margin_objective,
    zero_one_loss,
)

# Weak learners
from .weak_learner import DecisionStump, StumpClassifier

__all__ = [
    "__version__",
    "BoostingResult",
    "ColumnGenerationUpdate",
    "ConvergenceTracker",
    "EngineState",
    "EntropyRegularizedUpdate",
    "ERLPBoost",
    "LPBoost",
    "MarginBoostingEngine",
    "RoundUpdate",
    "ConfigurationError",
    "OptimizerInfeasible",
    "Classifier",
    "WeakLearner",
    "WeightedMajority",
    "combine_hypotheses",
    "configure_logging",
    "get_logger",
    "BoostingLogger",
    "RoundRecord",
    "RunHistory",
    "SoftMarginObjective",
    "Sample",
    "DistributionOptimizer",
    "LPModel",
    "QPModel",
    "edge_of_hypothesis",
    "entropy_from_uni_distribution",
    "margins_of_hypothesis",
    "soft_margin_objective",
    "zero_one_loss",
    "DecisionStump",
    "StumpClassifier",
]
