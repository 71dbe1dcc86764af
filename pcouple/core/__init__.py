"""History containers and the numerical pieces of Aitken relaxation."""

from .extrapolate import nearest_neighbour_estimate
from .factors import AitkenFactorSequence
from .history import PointIndex, TimeHistory, TimeLevel
from .norms import NormEntry, ResidualNormCache, residual_l2_norm
from .state import PRESTART_TIME, CouplingState
from .tolerance import TolerancePolicy, as_point, squared_distance

__all__ = [
    "AitkenFactorSequence",
    "CouplingState",
    "NormEntry",
    "PRESTART_TIME",
    "PointIndex",
    "ResidualNormCache",
    "TimeHistory",
    "TimeLevel",
    "TolerancePolicy",
    "as_point",
    "nearest_neighbour_estimate",
    "residual_l2_norm",
    "squared_distance",
]
