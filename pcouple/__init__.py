"""Adaptive Aitken under-relaxation for partitioned solver coupling."""

from .core import CouplingState, TimeHistory, TimeLevel, TolerancePolicy
from .errors import (
    InsufficientHistoryError,
    InvariantViolationError,
    RelaxationError,
    UnsupportedInputError,
)
from .relaxation import AitkenRelaxation, AitkenSettings, make_relaxation
from .run.loader import load_relaxation, relaxation_from_dict
from .utils.logging import RelaxationLogger

__all__ = [
    "AitkenRelaxation",
    "AitkenSettings",
    "CouplingState",
    "InsufficientHistoryError",
    "InvariantViolationError",
    "RelaxationError",
    "RelaxationLogger",
    "TimeHistory",
    "TimeLevel",
    "TolerancePolicy",
    "UnsupportedInputError",
    "load_relaxation",
    "make_relaxation",
    "relaxation_from_dict",
]

__version__ = "0.1.0"
