"""Settings of the Aitken relaxation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.tolerance import MACHINE_EPS, TolerancePolicy, as_point

# The recursion needs the current level and its two predecessors.
MIN_RETAINED_LEVELS = 3


@dataclass
class AitkenSettings:
    initial_factor: float = 1.0
    factor_max: float = 1.0
    time_epsilon: float = MACHINE_EPS
    point_epsilon: float = MACHINE_EPS
    retain_levels: Optional[int] = None
    verbose: bool = False
    profiling: bool = False
    warm_start_values: List[Tuple[np.ndarray, Any]] = field(default_factory=list)
    warm_start_residual_norm: Optional[float] = None

    def __post_init__(self) -> None:
        if self.factor_max < 0.0:
            raise ValueError("factorMax must be >= 0")
        if self.retain_levels is not None and self.retain_levels < MIN_RETAINED_LEVELS:
            raise ValueError(f"retainLevels must be >= {MIN_RETAINED_LEVELS}")
        self.warm_start_values = [(as_point(p), v) for p, v in self.warm_start_values]

    @property
    def tolerance(self) -> TolerancePolicy:
        return TolerancePolicy(self.time_epsilon, self.point_epsilon)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AitkenSettings":
        if not data:
            return cls()
        retain = data.get("retainLevels")
        warm = data.get("warmStart") or {}
        points = list(warm.get("points", []) or [])
        values = list(warm.get("values", []) or [])
        if len(points) != len(values):
            raise ValueError(
                f"warmStart has {len(points)} points but {len(values)} values"
            )
        norm = warm.get("residualNorm")
        return cls(
            initial_factor=float(data.get("initialFactor", 1.0)),
            factor_max=float(data.get("factorMax", 1.0)),
            time_epsilon=float(data.get("timeEpsilon", MACHINE_EPS)),
            point_epsilon=float(data.get("pointEpsilon", MACHINE_EPS)),
            retain_levels=None if retain is None else int(retain),
            verbose=bool(data.get("verbose", False)),
            profiling=bool(data.get("profiling", False)),
            warm_start_values=[(p, _as_value(v)) for p, v in zip(points, values)],
            warm_start_residual_norm=None if norm is None else float(norm),
        )


def _as_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return np.asarray(value, dtype=float)
    return float(value)
