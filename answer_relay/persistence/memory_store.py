"""In-memory settings store used by tests, the CLI and the dev server."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional


class InMemorySettingsStore:
    """Dictionary-backed implementation of ``SettingsStore``."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = {k: v for k, v in (initial or {}).items() if v is not None}

    def get(self, keys: Iterable[str]) -> Dict[str, str]:
        return {k: self._values[k] for k in keys if k in self._values}

    def set(self, values: Mapping[str, Optional[str]]) -> None:
        self._values.update({k: v for k, v in values.items() if v is not None})

    def remove(self, keys: Iterable[str]) -> None:
        for k in keys:
            self._values.pop(k, None)


__all__ = ["InMemorySettingsStore"]
