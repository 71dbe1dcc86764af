"""Aitken dynamic under-relaxation of interface values."""

from __future__ import annotations

from collections import defaultdict
from time import perf_counter
from typing import Any, Dict, List, Optional

import numpy as np

from ..core.extrapolate import nearest_neighbour_estimate
from ..core.history import TimeLevel
from ..core.state import CouplingState
from ..core.tolerance import PointLike, TolerancePolicy, as_point
from ..errors import UnsupportedInputError
from ..utils.logging import RelaxationLogger
from .base import RelaxationAlgorithm, register_relaxation
from .settings import AitkenSettings


def _as_field_value(value: Any) -> Any:
    if isinstance(value, (list, tuple, np.ndarray)):
        return np.asarray(value, dtype=float)
    return value


def _zero_like(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return np.zeros_like(value, dtype=float)
    return 0.0


@register_relaxation("aitken")
class AitkenRelaxation(RelaxationAlgorithm):
    """Relax raw interface values with a per-time-level Aitken factor.

    Each call to :meth:`relax` blends the raw value with the value accepted at
    the same point on the previous time level (extrapolated from the two
    nearest recorded points when the point is new there). The blend weight
    for a level is derived from the residual norms of the two levels before
    it. All history lives in :attr:`state`, which the engine mutates.

    ``config`` is either an :class:`AitkenSettings` or a dictionary of the
    camelCase keys understood by :meth:`AitkenSettings.from_dict`. A ``state``
    passed in is used as is; its factor bounds take precedence over the
    settings.
    """

    def __init__(
        self,
        config=None,
        *,
        state: Optional[CouplingState] = None,
        logger: Optional[RelaxationLogger] = None,
    ) -> None:
        settings = config if isinstance(config, AitkenSettings) else AitkenSettings.from_dict(config)
        self.settings = settings
        self.profiling = settings.profiling
        self.timings = defaultdict(float)
        self.logger = logger or RelaxationLogger("aitken", verbose=settings.verbose)
        if state is None:
            state = CouplingState.create(
                tolerance=settings.tolerance,
                initial_factor=settings.initial_factor,
                factor_max=settings.factor_max,
                logger=self.logger,
                warm_start_values=settings.warm_start_values,
                warm_start_residual_norm=settings.warm_start_residual_norm,
            )
        self.state = state

    def enable_profiling(self, flag: bool = True) -> None:
        self.profiling = flag
        self.timings.clear()

    def reset_timings(self) -> None:
        self.timings.clear()

    def get_timings(self) -> Dict[str, float]:
        return dict(self.timings)

    @property
    def tolerance(self) -> TolerancePolicy:
        return self.state.history.tolerance

    def relax(self, time: float, point: PointLike, value: Any) -> Any:
        tic = perf_counter() if self.profiling else None
        t = float(time)
        p = as_point(point)
        raw = _as_field_value(value)
        history = self.state.history

        self._check_monotonic(t)
        # resolved before the level exists so a failed estimate leaves no trace
        old = self._prior_value(history.previous_level(t), p, raw)
        level = history.find_level(t)
        if level is None:
            level = history.add_level(t)
            self._evict()
        factor = self._resolve_factor(history.index_of(level))

        relaxed = factor * raw + (1.0 - factor) * old
        level.record(p, relaxed, raw - relaxed)

        if self.profiling and tic is not None:
            self.timings["relax"] += perf_counter() - tic
        return relaxed

    def factor_at(self, time: float) -> float:
        level = self._known_level(time)
        return self._resolve_factor(self.state.history.index_of(level))

    def residual_norm_at(self, time: float) -> float:
        return self.state.norms.norm_at(self._known_level(time))

    def value_at(self, time: float, point: PointLike) -> Any:
        return self._known_level(time).value_at(point)

    def residual_at(self, time: float, point: PointLike) -> Any:
        return self._known_level(time).residual_at(point)

    def time_levels(self) -> List[float]:
        return self.state.history.times()

    def _known_level(self, time: float) -> TimeLevel:
        level = self.state.history.find_level(float(time))
        if level is None:
            raise KeyError(f"No time level recorded at t={time}")
        return level

    def _check_monotonic(self, t: float) -> None:
        latest = self.state.history.latest()
        if latest is not None and self.tolerance.is_before(t, latest.time):
            message = (
                "Non-monotonic time marching is not supported: "
                f"t={t} precedes the latest level t={latest.time}"
            )
            self.logger.warn(message, time=t)
            raise UnsupportedInputError(message)

    def _evict(self) -> None:
        retain = self.settings.retain_levels
        if retain is None:
            return
        while len(self.state.history) > retain:
            level = self.state.evict_oldest()
            self.logger.log(level.time, "evict", points=level.size)

    def _prior_value(self, previous: Optional[TimeLevel], point: np.ndarray, raw: Any) -> Any:
        if previous is None or previous.size == 0:
            return _zero_like(raw)
        tic = perf_counter() if self.profiling else None
        old = nearest_neighbour_estimate(previous, point)
        if self.profiling and tic is not None:
            self.timings["extrapolate"] += perf_counter() - tic
        return old

    def _resolve_factor(self, index: int) -> float:
        tic = perf_counter() if self.profiling else None
        factor = self.state.factors.resolve(self.state.history, self.state.norms, index)
        if self.profiling and tic is not None:
            self.timings["factor"] += perf_counter() - tic
        return factor
