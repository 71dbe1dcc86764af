"""Two-point inverse-distance estimate for points missing from a level."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..errors import InsufficientHistoryError
from .history import TimeLevel
from .tolerance import PointLike, as_point


def nearest_neighbour_estimate(level: TimeLevel, point: PointLike) -> Any:
    """Estimate the value of ``level`` at ``point``.

    A recorded point within tolerance is returned as stored. Otherwise the two
    closest recorded points are blended with weights swapped across their
    distances, so the nearer point dominates::

        (v1 * r2 + v2 * r1) / (r1 + r2),  r1 <= r2
    """

    p = as_point(point)
    slot = level.find(p)
    if slot is not None:
        return level.value_of_slot(slot)
    if level.size < 2:
        raise InsufficientHistoryError(
            f"Extrapolation at t={level.time} needs two recorded points, found {level.size}"
        )

    coords = level.coordinates()
    d2 = np.sum((coords - p) ** 2, axis=1)
    first, second = np.argsort(d2, kind="stable")[:2]
    r1 = float(np.sqrt(d2[first]))
    r2 = float(np.sqrt(d2[second]))
    v1 = level.value_of_slot(int(first))
    v2 = level.value_of_slot(int(second))
    return (v1 * r2 + v2 * r1) / (r1 + r2)
