"""Mutable history owned by one relaxation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from ..utils.logging import RelaxationLogger
from .factors import AitkenFactorSequence
from .history import PRESTART_TIME, TimeHistory, TimeLevel
from .norms import ResidualNormCache
from .tolerance import PointLike, TolerancePolicy


@dataclass
class CouplingState:
    history: TimeHistory
    norms: ResidualNormCache
    factors: AitkenFactorSequence

    @classmethod
    def create(
        cls,
        tolerance: Optional[TolerancePolicy] = None,
        initial_factor: float = 1.0,
        factor_max: float = 1.0,
        logger: Optional[RelaxationLogger] = None,
        warm_start_values: Optional[Sequence[Tuple[PointLike, Any]]] = None,
        warm_start_residual_norm: Optional[float] = None,
    ) -> "CouplingState":
        state = cls(
            history=TimeHistory(tolerance),
            norms=ResidualNormCache(logger),
            factors=AitkenFactorSequence(initial_factor, factor_max, logger),
        )
        if warm_start_values:
            for point, value in warm_start_values:
                state.history.record_or_update(PRESTART_TIME, point, value)
        if warm_start_residual_norm is not None:
            level = state.history.add_level(PRESTART_TIME)
            state.norms.seed(level, warm_start_residual_norm)
        return state

    def evict_oldest(self) -> TimeLevel:
        level = self.history.evict_oldest()
        self.norms.discard(level.time)
        self.factors.discard(level.time)
        return level
