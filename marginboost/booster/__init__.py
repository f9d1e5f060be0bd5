"""Margin-maximizing boosters and the engine they share."""

from .core import (
    BoostingResult,
    ConvergenceTracker,
    EngineState,
    MarginBoostingEngine,
    RoundUpdate,
)
from .erlpboost import ERLPBoost, EntropyRegularizedUpdate
from .lpboost import ColumnGenerationUpdate, LPBoost

__all__ = [
    "BoostingResult",
    "ConvergenceTracker",
    "EngineState",
    "MarginBoostingEngine",
    "RoundUpdate",
    "ColumnGenerationUpdate",
    "LPBoost",
    "EntropyRegularizedUpdate",
    "ERLPBoost",
]
