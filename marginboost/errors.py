"""Exceptions raised by boosters and distribution optimizers."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid run parameters or sample, detected before any round runs."""


class OptimizerInfeasible(RuntimeError):
    """The distribution optimizer failed to produce an optimal solution.

    Unreachable for a valid configuration (``1 <= nu <= n`` keeps the capped
    simplex non-empty), so it signals a broken internal invariant.
    """


__all__ = ["ConfigurationError", "OptimizerInfeasible"]
