"""Event logging for relaxation runs."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class RelaxationLogger:
    name: str = "aitken"
    verbose: bool = False
    history: List[Dict[str, Any]] = field(default_factory=list)

    def log(self, time: float, event: str, **quantities: Any) -> None:
        entry = {"time": time, "event": event, **quantities}
        self.history.append(entry)
        if not self.verbose:
            return
        pieces = [f"{self.name} t = {time:.6g}", event]
        for key, value in quantities.items():
            if isinstance(value, float):
                pieces.append(f"{key} = {value:.3e}")
            else:
                pieces.append(f"{key} = {value}")
        print(" | ".join(pieces), flush=True)

    def warn(self, message: str, time: float | None = None) -> None:
        self.history.append({"time": time, "event": "warning", "message": message})
        print(f"{self.name}: {message}", file=sys.stderr, flush=True)

    def events(self, kind: str) -> List[Dict[str, Any]]:
        return [entry for entry in self.history if entry.get("event") == kind]
