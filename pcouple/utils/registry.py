"""Name to factory registry used for runtime selection of algorithms."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, TypeVar

T = TypeVar("T")


def _normalise(key: str) -> str:
    return key.strip().lower().replace("-", "_")


class Registry:
    def __init__(self, name: str) -> None:
        self.name = name
        self._factories: Dict[str, Callable[..., Any]] = {}

    def register(self, key: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
        norm = _normalise(key)

        def decorator(factory: Callable[..., T]) -> Callable[..., T]:
            if norm in self._factories:
                raise ValueError(f"{self.name} registry already has key {key}")
            self._factories[norm] = factory
            return factory

        return decorator

    def __contains__(self, key: str) -> bool:
        return _normalise(key) in self._factories

    def get(self, key: str) -> Callable[..., Any]:
        try:
            return self._factories[_normalise(key)]
        except KeyError as exc:
            known = ", ".join(sorted(self._factories)) or "none"
            raise KeyError(f"Unknown {self.name} '{key}' (known: {known})") from exc

    def create(self, key: str, *args: Any, **kwargs: Any) -> Any:
        return self.get(key)(*args, **kwargs)

    def keys(self) -> List[str]:
        return sorted(self._factories)
