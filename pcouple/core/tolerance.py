"""Equality and ordering predicates for time values and interface points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

import numpy as np

MACHINE_EPS = float(np.finfo(float).eps)

PointLike = Union[float, Iterable[float], np.ndarray]


def as_point(point: PointLike) -> np.ndarray:
    """Coerce a scalar or coordinate sequence to a 1-D float array."""

    arr = np.atleast_1d(np.asarray(point, dtype=float))
    if arr.ndim != 1:
        raise ValueError(f"Point must be one-dimensional, got shape {arr.shape}")
    return arr


def squared_distance(p: np.ndarray, q: np.ndarray) -> float:
    diff = np.asarray(p, dtype=float) - np.asarray(q, dtype=float)
    return float(np.dot(diff, diff))


@dataclass(frozen=True)
class TolerancePolicy:
    """Symmetric epsilon tests shared by every history lookup.

    Two times are the same level when ``|a - b| <= time_epsilon``; two points
    are the same focus point when their squared distance is at most
    ``point_epsilon``.
    """

    time_epsilon: float = MACHINE_EPS
    point_epsilon: float = MACHINE_EPS

    def __post_init__(self) -> None:
        if self.time_epsilon < 0.0:
            raise ValueError("time_epsilon must be >= 0")
        if self.point_epsilon < 0.0:
            raise ValueError("point_epsilon must be >= 0")

    def same_time(self, a: float, b: float) -> bool:
        # equality first so that infinite sentinels match themselves
        return a == b or abs(a - b) <= self.time_epsilon

    def is_before(self, a: float, b: float) -> bool:
        return a < b and not self.same_time(a, b)

    def same_point(self, p: np.ndarray, q: np.ndarray) -> bool:
        return squared_distance(p, q) <= self.point_epsilon
