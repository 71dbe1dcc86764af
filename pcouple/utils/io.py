"""YAML helpers for settings files and history dumps."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml


def read_yaml_file(path: str | Path) -> Dict[str, Any]:
    file_path = Path(path)
    with file_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path} must contain a mapping at top level")
    return data


def write_yaml_file(path: str | Path, data: Any) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
    return file_path
