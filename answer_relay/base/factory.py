"""Backend client factory.

Purpose
-------
Centralize creation of backend clients by provider tag. Client modules are
imported lazily using ``importlib`` so that importing the base layer never
pulls in every backend.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.

Scope
-----
``gemini`` and ``chatgpt`` map to fixed-format clients; ``custom`` maps to the
endpoint discovery client.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from .kinds import ProviderKind


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or its client initialized."""


class ClientFactory:
    """Create backend clients based on a provider tag."""

    _CLIENTS: Dict[ProviderKind, Dict[str, str]] = {
        ProviderKind.GEMINI: {"module": "answer_relay.gemini.client", "class": "GeminiClient"},
        ProviderKind.CHATGPT: {"module": "answer_relay.openai.client", "class": "ChatGPTClient"},
        ProviderKind.CUSTOM: {"module": "answer_relay.custom.client", "class": "EndpointDiscoveryClient"},
    }

    @classmethod
    def create(cls, provider: ProviderKind | str, **kwargs: Any) -> Any:
        """Create a client instance for ``provider``.

        Parameters
        ----------
        provider:
            Provider tag or its string value (``"gemini"``, ``"chatgpt"``,
            ``"custom"``).
        **kwargs:
            Client constructor kwargs (for example ``client=`` to inject an
            ``httpx.AsyncClient``).

        Raises
        ------
        UnknownProviderError
            If the provider is unknown, the module fails to import, or the
            client constructor rejects the arguments.
        """
        try:
            kind = ProviderKind.parse(provider)
        except ValueError as exc:
            raise UnknownProviderError(f"Unknown provider '{provider}'") from exc
        entry = cls._CLIENTS[kind]
        module_path, class_name = entry["module"], entry["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{kind.value}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - packaging error
            raise UnknownProviderError(
                f"Client class '{class_name}' not found in '{module_path}'"
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{kind.value}' client constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return supported provider names in deterministic order."""
        return tuple(k.value for k in cls._CLIENTS)


__all__ = ["ClientFactory", "UnknownProviderError"]
