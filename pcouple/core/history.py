"""Per-time-level storage of relaxed values and residuals."""

from __future__ import annotations

import bisect
import itertools
import math
from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..errors import InvariantViolationError, UnsupportedInputError
from .tolerance import PointLike, TolerancePolicy, as_point, squared_distance

# Key of the level that holds warm-start data, before any real time.
PRESTART_TIME = -math.inf

# Beyond this dimension probing 3**dim neighbour cells costs more than a scan.
_MAX_HASHED_DIM = 3


class PointIndex:
    """Deduplicating point set with slot numbers.

    Points are bucketed by quantised coordinates with a cell size of
    ``sqrt(point_epsilon)`` so any two points within tolerance sit in the same
    or an adjacent cell.
    """

    def __init__(self, tolerance: TolerancePolicy) -> None:
        self.tolerance = tolerance
        self._cell = math.sqrt(tolerance.point_epsilon)
        self._points: List[np.ndarray] = []
        self._buckets: Dict[Tuple, List[int]] = defaultdict(list)
        self._offsets: List[Tuple[int, ...]] = []
        self._coords: Optional[np.ndarray] = None
        self.dim: Optional[int] = None

    def __len__(self) -> int:
        return len(self._points)

    def _check_dim(self, point: np.ndarray) -> None:
        if self.dim is not None and point.shape[0] != self.dim:
            raise UnsupportedInputError(
                f"Point of dimension {point.shape[0]} does not match recorded dimension {self.dim}"
            )

    def _key(self, point: np.ndarray) -> Tuple:
        if self._cell == 0.0:
            return tuple(point.tolist())
        return tuple(int(c) for c in np.floor(point / self._cell))

    def _candidates(self, point: np.ndarray) -> Iterator[int]:
        if self._cell == 0.0:
            yield from self._buckets.get(self._key(point), ())
            return
        if self.dim is not None and self.dim > _MAX_HASHED_DIM:
            yield from range(len(self._points))
            return
        key = self._key(point)
        for offset in self._offsets:
            neighbour = tuple(k + o for k, o in zip(key, offset))
            yield from self._buckets.get(neighbour, ())

    def find(self, point: np.ndarray) -> Optional[int]:
        if not self._points:
            return None
        self._check_dim(point)
        best: Optional[int] = None
        best_d2 = math.inf
        for slot in self._candidates(point):
            d2 = squared_distance(point, self._points[slot])
            if d2 <= self.tolerance.point_epsilon and d2 < best_d2:
                best, best_d2 = slot, d2
        return best

    def add(self, point: np.ndarray) -> int:
        self._check_dim(point)
        if self.dim is None:
            self.dim = int(point.shape[0])
            self._offsets = list(itertools.product((-1, 0, 1), repeat=self.dim))
        slot = len(self._points)
        self._points.append(point.copy())
        self._buckets[self._key(point)].append(slot)
        self._coords = None
        return slot

    def coordinates(self) -> np.ndarray:
        if self._coords is None:
            if self._points:
                self._coords = np.vstack(self._points)
            else:
                self._coords = np.zeros((0, self.dim or 0))
        return self._coords


class TimeLevel:
    """Values and residuals recorded at one time level, keyed by focus point."""

    def __init__(self, time: float, tolerance: TolerancePolicy) -> None:
        self.time = float(time)
        self.tolerance = tolerance
        self._index = PointIndex(tolerance)
        self._values: List[Any] = []
        self._residuals: Dict[int, Any] = {}

    def __repr__(self) -> str:
        return f"TimeLevel(time={self.time!r}, points={self.size}, residuals={self.residual_count})"

    @property
    def size(self) -> int:
        return len(self._values)

    @property
    def residual_count(self) -> int:
        return len(self._residuals)

    def find(self, point: PointLike) -> Optional[int]:
        return self._index.find(as_point(point))

    def value_at(self, point: PointLike) -> Any:
        slot = self.find(point)
        return None if slot is None else self._values[slot]

    def residual_at(self, point: PointLike) -> Any:
        slot = self.find(point)
        return None if slot is None else self._residuals.get(slot)

    def value_of_slot(self, slot: int) -> Any:
        return self._values[slot]

    def record_value(self, point: PointLike, value: Any) -> int:
        p = as_point(point)
        slot = self._index.find(p)
        if slot is None:
            slot = self._index.add(p)
            self._values.append(value)
        else:
            self._values[slot] = value
        if len(self._index) != len(self._values):
            raise InvariantViolationError(
                f"Level t={self.time}: {len(self._index)} points but {len(self._values)} values"
            )
        return slot

    def record_residual(self, point: PointLike, residual: Any) -> int:
        p = as_point(point)
        slot = self._index.find(p)
        if slot is None:
            raise InvariantViolationError(
                f"Residual for point {p.tolist()} at t={self.time} has no recorded value"
            )
        self._residuals[slot] = residual
        return slot

    def record(self, point: PointLike, value: Any, residual: Any) -> int:
        slot = self.record_value(point, value)
        self._residuals[slot] = residual
        return slot

    def coordinates(self) -> np.ndarray:
        return self._index.coordinates()

    def values(self) -> List[Any]:
        return list(self._values)

    def residuals(self) -> List[Any]:
        return list(self._residuals.values())


class TimeHistory:
    """Time levels ordered by time key.

    Keys are kept sorted so lookups are a bisection plus an epsilon check on
    the neighbouring keys.
    """

    def __init__(self, tolerance: Optional[TolerancePolicy] = None) -> None:
        self.tolerance = tolerance or TolerancePolicy()
        self._times: List[float] = []
        self._levels: List[TimeLevel] = []

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[TimeLevel]:
        return iter(list(self._levels))

    def __getitem__(self, index: int) -> TimeLevel:
        return self._levels[index]

    def times(self) -> List[float]:
        return list(self._times)

    def latest(self) -> Optional[TimeLevel]:
        return self._levels[-1] if self._levels else None

    def find_level(self, time: float) -> Optional[TimeLevel]:
        i = bisect.bisect_left(self._times, time)
        best: Optional[TimeLevel] = None
        best_gap = math.inf
        for j in (i - 1, i):
            if 0 <= j < len(self._times) and self.tolerance.same_time(self._times[j], time):
                gap = 0.0 if self._times[j] == time else abs(self._times[j] - time)
                if gap < best_gap:
                    best, best_gap = self._levels[j], gap
        return best

    def previous_level(self, time: float) -> Optional[TimeLevel]:
        """Most recent level strictly before ``time``."""

        i = bisect.bisect_left(self._times, time)
        while i > 0 and self.tolerance.same_time(self._times[i - 1], time):
            i -= 1
        return self._levels[i - 1] if i > 0 else None

    def add_level(self, time: float) -> TimeLevel:
        existing = self.find_level(time)
        if existing is not None:
            return existing
        level = TimeLevel(time, self.tolerance)
        i = bisect.bisect_right(self._times, level.time)
        self._times.insert(i, level.time)
        self._levels.insert(i, level)
        return level

    def index_of(self, level: TimeLevel) -> int:
        i = bisect.bisect_left(self._times, level.time)
        while i < len(self._levels) and self._times[i] == level.time:
            if self._levels[i] is level:
                return i
            i += 1
        raise InvariantViolationError(f"Level t={level.time} is not part of this history")

    def record_or_update(self, time: float, point: PointLike, value: Any) -> TimeLevel:
        level = self.add_level(time)
        level.record_value(point, value)
        return level

    def record_or_update_residual(self, time: float, point: PointLike, residual: Any) -> TimeLevel:
        level = self.find_level(time)
        if level is None:
            raise InvariantViolationError(f"Residual recorded for unknown level t={time}")
        level.record_residual(point, residual)
        return level

    def evict_oldest(self) -> TimeLevel:
        if not self._levels:
            raise IndexError("evict_oldest on empty history")
        self._times.pop(0)
        return self._levels.pop(0)
