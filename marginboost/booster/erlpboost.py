"""
ERLPBoost: entropy-regularized LPBoost.

Regularizing the soft margin LP with the relative entropy of the
distribution (weight ``1/eta``) bounds the number of rounds needed for an
``tolerance``-accurate solution by

```
    max_iter = ceil(max(4 / half_tol, 8 ln(n / nu) / half_tol^2)),
    half_tol = tolerance / 2.
```

The certificate is checked before the optimizer update, so the hypothesis of
the final round is never added to the combination.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..errors import ConfigurationError
from ..sample import Sample
from ..solvers.qp_model import QPModel
from ..utils import edge_from_margins, entropy_from_uni_distribution
from .core import MarginBoostingEngine, RoundUpdate


class EntropyRegularizedUpdate(RoundUpdate):
    """
    Entropy-regularized round.

    Args:
        sub_tolerance: Accuracy of the sequential quadratic solves; defaults
            to ``half_tol / 10``.
        max_passes: Quadratic approximations per update.
    """

    name = "ERLPBoost"
    certify_before_update = True

    def __init__(self, sub_tolerance: Optional[float] = None, max_passes: int = 100) -> None:
        self.sub_tolerance = sub_tolerance
        self.max_passes = max_passes
        self.half_tol = 0.0
        self.eta = 0.0
        self.max_iter = 0

    def configure(self, n_sample: int, nu: float, tolerance: float) -> None:
        half_tol = tolerance / 2.0
        if not 0.0 < half_tol < 1.0:
            raise ConfigurationError(
                f"{self.name} needs 0 < tolerance / 2 < 1, got tolerance={tolerance}."
            )
        ln_n_nu = math.log(n_sample / nu)
        self.half_tol = half_tol
        self.eta = max(0.5, ln_n_nu / half_tol)
        self.max_iter = int(math.ceil(max(4.0 / half_tol, 8.0 * ln_n_nu / half_tol**2)))

    def make_optimizer(self, n_sample: int, upper_bound: float) -> QPModel:
        sub_tolerance = self.sub_tolerance
        if sub_tolerance is None:
            sub_tolerance = self.half_tol / 10.0
        model = QPModel(sub_tolerance=sub_tolerance, max_passes=self.max_passes)
        model.initialize(n_sample, upper_bound, eta=self.eta)
        return model

    def primal_value(self, margins: np.ndarray, dist: np.ndarray) -> float:
        return edge_from_margins(margins, dist) + entropy_from_uni_distribution(dist) / self.eta

    def threshold(self, tolerance: float) -> float:
        return tolerance / 2.0

    def round_limit(self, n_sample: int, nu: float, tolerance: float) -> Optional[int]:
        return self.max_iter


class ERLPBoost(MarginBoostingEngine):
    """
    ERLPBoost booster.

    ``run`` needs no round budget: the run ends after at most
    :attr:`max_iter` rounds.
    """

    def __init__(
        self,
        sample: Sample,
        tolerance: Optional[float] = None,
        nu: float = 1.0,
        sub_tolerance: Optional[float] = None,
    ) -> None:
        self._regularized = EntropyRegularizedUpdate(sub_tolerance=sub_tolerance)
        super().__init__(sample, self._regularized, tolerance=tolerance, nu=nu)

    @property
    def eta(self) -> float:
        """Regularization parameter, set by :meth:`preprocess`."""
        return self._regularized.eta

    @property
    def max_iter(self) -> int:
        """Round limit, set by :meth:`preprocess`."""
        return self._regularized.max_iter


__all__ = ["EntropyRegularizedUpdate", "ERLPBoost"]
