"""Base relaxation algorithm and its registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..core.tolerance import PointLike
from ..utils.registry import Registry


relaxation_registry = Registry("relaxation")


def register_relaxation(name: str):
    return relaxation_registry.register(name)


def make_relaxation(name: str, config=None):
    return relaxation_registry.create(name, config or {})


class RelaxationAlgorithm(ABC):
    @abstractmethod
    def relax(self, time: float, point: PointLike, value: Any) -> Any:
        """Return the relaxed value of ``value`` at ``point`` and ``time``."""
