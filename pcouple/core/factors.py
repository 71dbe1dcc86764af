"""Aitken relaxation factor per time level."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np

from ..errors import InvariantViolationError
from ..utils.logging import RelaxationLogger
from .history import TimeHistory, TimeLevel
from .norms import ResidualNormCache


class AitkenFactorSequence:
    """Relaxation factors derived from the residual norms of earlier levels.

    The factor of level ``j`` depends on the norms of its two predecessors and
    on the factor of ``j - 1``. :meth:`resolve` walks the ordered history once,
    finds the earliest level whose inputs changed, and recomputes forward from
    there.
    """

    def __init__(
        self,
        initial_factor: float = 1.0,
        factor_max: float = 1.0,
        logger: Optional[RelaxationLogger] = None,
    ) -> None:
        if factor_max < 0.0:
            raise ValueError("factor_max must be >= 0")
        self.initial_factor = float(initial_factor)
        self.factor_max = float(factor_max)
        self.logger = logger
        self._factors: Dict[float, float] = {}

    def __len__(self) -> int:
        return len(self._factors)

    def clamp(self, value: float) -> float:
        return float(np.sign(value) * min(abs(value), self.factor_max))

    def factor_at(self, level: TimeLevel) -> Optional[float]:
        return self._factors.get(level.time)

    def items(self) -> List[Tuple[float, float]]:
        return sorted(self._factors.items())

    def discard(self, time: float) -> None:
        self._factors.pop(time, None)

    def resolve(self, history: TimeHistory, norms: ResidualNormCache, index: int) -> float:
        first = next(
            (j for j in range(index + 1) if self._needs_update(history, norms, j)),
            None,
        )
        if first is not None:
            for j in range(first, index + 1):
                self._store(history[j].time, self._compute(history, norms, j))
        return self._factors[history[index].time]

    def _needs_update(self, history: TimeHistory, norms: ResidualNormCache, j: int) -> bool:
        if history[j].time not in self._factors:
            return True
        if j < 2:
            return False
        return any(
            norms.has_norm(level) and norms.is_stale(level)
            for level in (history[j - 1], history[j - 2])
        )

    def _compute(self, history: TimeHistory, norms: ResidualNormCache, j: int) -> float:
        level = history[j]
        if j < 2:
            return self._factors.get(level.time, self.initial_factor)

        previous, older = history[j - 1], history[j - 2]
        # a warm start without a residual norm gives nothing to update from
        if not (norms.has_norm(previous) and norms.has_norm(older)):
            return self.initial_factor
        nominator = norms.norm_at(older)
        previous_norm = norms.norm_at(previous)
        denominator = previous_norm - nominator
        if denominator == 0.0:
            if nominator == 0.0:
                return 0.0
            raise InvariantViolationError(
                f"Residual norms at t={older.time} and t={previous.time} are equal "
                f"({nominator:.6e}, {previous_norm:.6e}); Aitken update undefined at t={level.time}"
            )
        prior = self._factors.get(previous.time, self.initial_factor)
        return self.clamp(-prior * (nominator / denominator))

    def _store(self, time: float, factor: float) -> None:
        previous = self._factors.get(time)
        if previous is not None and previous == factor:
            return
        self._factors[time] = factor
        if self.logger is None:
            return
        if previous is None:
            self.logger.log(time, "factor", factor=factor)
        else:
            self.logger.log(time, "factor_changed", factor=factor, previous=previous)
