"""Relaxation algorithms."""

from .base import RelaxationAlgorithm, make_relaxation, register_relaxation, relaxation_registry
from .settings import AitkenSettings
from .aitken import AitkenRelaxation

__all__ = [
    "AitkenRelaxation",
    "AitkenSettings",
    "RelaxationAlgorithm",
    "make_relaxation",
    "register_relaxation",
    "relaxation_registry",
]
