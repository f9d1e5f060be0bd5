"""Experiment tooling around boosters."""

from .logger import BoostingLogger, RoundRecord, RunHistory, SoftMarginObjective

__all__ = ["BoostingLogger", "RoundRecord", "RunHistory", "SoftMarginObjective"]
