"""
Credential model read once per answer call.

The provider tag is decided by :func:`answer_relay.base.credentials.sniff_provider`
from the raw string's shape, never trusted from the caller alone.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..credentials import mask_secret, normalize_endpoint, sniff_provider
from ..kinds import ProviderKind


@dataclass(frozen=True, repr=False)
class Credential:
    """Secret value tagged with the provider family it routes to.

    Attributes:
        raw: API key, or endpoint URL for self-hosted backends.
        provider: Inferred provider tag.
    """

    raw: str
    provider: ProviderKind

    @classmethod
    def from_raw(cls, raw: Optional[str], selected: ProviderKind | str | None = None) -> "Credential":
        """Build a credential, tagging it with the sniffed provider."""
        value = (raw or "").strip()
        return cls(raw=value, provider=sniff_provider(value, selected))

    @property
    def is_custom(self) -> bool:
        return self.provider is ProviderKind.CUSTOM

    @property
    def endpoint_url(self) -> str:
        """Normalized endpoint URL (only meaningful for custom credentials)."""
        return normalize_endpoint(self.raw)

    def masked(self) -> str:
        return mask_secret(self.raw)

    def __repr__(self) -> str:
        return f"Credential(raw={self.masked()!r}, provider={self.provider.value!r})"


__all__ = ["Credential"]
