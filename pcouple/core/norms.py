"""Lazily cached L2 norms of the residuals stored at each time level."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import numpy as np

from ..utils.logging import RelaxationLogger
from .history import PRESTART_TIME, TimeLevel


@dataclass
class NormEntry:
    count: int
    norm: float


def residual_l2_norm(residuals: Iterable) -> float:
    total = 0.0
    for residual in residuals:
        total += float(np.sum(np.square(residual)))
    return math.sqrt(total)


class ResidualNormCache:
    """Norm per level, valid while its cached count matches the live count."""

    def __init__(self, logger: Optional[RelaxationLogger] = None) -> None:
        self.logger = logger
        self._entries: Dict[float, NormEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, level: TimeLevel) -> Optional[NormEntry]:
        return self._entries.get(level.time)

    def has_norm(self, level: TimeLevel) -> bool:
        """False for a warm-start level without residuals or a non-zero seeded norm."""

        if level.time != PRESTART_TIME or level.residual_count:
            return True
        entry = self._entries.get(level.time)
        return entry is not None and entry.norm != 0.0

    def is_stale(self, level: TimeLevel) -> bool:
        entry = self._entries.get(level.time)
        return entry is None or entry.count != level.residual_count

    def seed(self, level: TimeLevel, norm: float) -> None:
        self._entries[level.time] = NormEntry(level.residual_count, float(norm))

    def refresh(self, level: TimeLevel) -> bool:
        """Recompute the norm of ``level`` if stale; True when recomputed."""

        if not self.is_stale(level):
            return False
        norm = residual_l2_norm(level.residuals())
        self._entries[level.time] = NormEntry(level.residual_count, norm)
        if self.logger is not None:
            self.logger.log(level.time, "norm", count=level.residual_count, norm=norm)
        return True

    def norm_at(self, level: TimeLevel) -> float:
        self.refresh(level)
        return self._entries[level.time].norm

    def discard(self, time: float) -> None:
        self._entries.pop(time, None)
