"""Settings storage contract for the answer pipeline.

The Coordinator reads the stored secret and provider selection through this
protocol at the start of each call; it never caches them across calls.

Design Principles:
- No concrete behavior; pure structural typing via ``Protocol``.
- Values are plain strings; keys are ``apiKey`` and ``aiProvider``.

Failure / Error Semantics:
- ``get`` omits keys that are not stored rather than raising.
- Implementations raise backend-specific exceptions only for I/O failures.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Protocol


class SettingsStore(Protocol):
    """Key/value settings store (``get``/``set``/``remove``)."""

    def get(self, keys: Iterable[str]) -> Dict[str, str]:
        """Return ``{key: value}`` for each stored key among ``keys``."""
        ...

    def set(self, values: Mapping[str, Optional[str]]) -> None:
        """Store every pair of ``values``; ``None`` values are skipped."""
        ...

    def remove(self, keys: Iterable[str]) -> None:
        """Delete ``keys``; missing keys are ignored."""
        ...


__all__ = ["SettingsStore"]
