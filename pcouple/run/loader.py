"""Create relaxation engines from YAML settings.

A settings file selects the algorithm by name and carries its options in a
block of the same name::

    Relaxation: Aitken
    Aitken:
      initialFactor: 0.5
      factorMax: 1.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..relaxation import make_relaxation
from ..relaxation.base import RelaxationAlgorithm
from ..utils.io import read_yaml_file

DEFAULT_RELAXATION = "Aitken"


def relaxation_from_dict(data: Dict[str, Any]) -> RelaxationAlgorithm:
    name = str(data.get("Relaxation", DEFAULT_RELAXATION))
    block = data.get(name)
    if block is None:
        # tolerate a lower-case block name
        block = data.get(name.lower(), {})
    return make_relaxation(name, block or {})


def load_relaxation(path: str | Path) -> RelaxationAlgorithm:
    return relaxation_from_dict(read_yaml_file(path))
