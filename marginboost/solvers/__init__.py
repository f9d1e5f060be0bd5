"""Distribution optimizers: the LP and regularized QP backends of the boosters."""

from .base import DistributionOptimizer
from .lp_model import LPModel
from .qp_model import QPModel

__all__ = ["DistributionOptimizer", "LPModel", "QPModel"]
