"""Credential shape sniffing and masking.

``sniff_provider`` decides whether a stored secret is a provider API key or a
custom endpoint URL. URL-like and bare-hostname-like strings always route to
the endpoint discovery client regardless of the provider the user selected.
Pure functions; no network I/O.
"""
from __future__ import annotations

import re
from typing import Optional

from .kinds import ProviderKind

# scheme://anything-without-whitespace
_ABSOLUTE_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://\S+$")
# label.label...tld with optional :port and /path
_BARE_HOST = re.compile(
    r"^(?:[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
    r"(?::\d{1,5})?(?:/\S*)?$"
)


def looks_like_endpoint(raw: Optional[str]) -> bool:
    """Return True when ``raw`` is an absolute URL or a bare hostname."""
    value = (raw or "").strip()
    if not value:
        return False
    return bool(_ABSOLUTE_URL.match(value) or _BARE_HOST.match(value))


def sniff_provider(raw: Optional[str], selected: ProviderKind | str | None = None) -> ProviderKind:
    """Classify ``raw`` as ``custom`` or fall back to the caller's selection.

    Parameters
    ----------
    raw:
        Stored secret string (API key or endpoint URL).
    selected:
        Provider explicitly chosen by the caller; used whenever ``raw`` is not
        endpoint-shaped. Defaults to Gemini when missing or unrecognized.
    """
    if looks_like_endpoint(raw):
        return ProviderKind.CUSTOM
    chosen = ProviderKind.parse(selected, default=ProviderKind.GEMINI)
    # A key-shaped secret never routes to discovery even if "custom" was picked.
    return ProviderKind.GEMINI if chosen is ProviderKind.CUSTOM else chosen


def normalize_endpoint(raw: str) -> str:
    """Return an absolute endpoint URL without a trailing slash.

    Bare hostnames get an ``https://`` scheme.
    """
    value = (raw or "").strip()
    if not _ABSOLUTE_URL.match(value):
        value = f"https://{value}"
    return value.rstrip("/")


def mask_secret(value: Optional[str]) -> str:
    """Mask a secret for display: first 8 chars, ``...``, last 4 chars.

    Short values are fully masked.
    """
    if not value:
        return ""
    if len(value) <= 12:
        return "*" * len(value)
    return f"{value[:8]}...{value[-4:]}"


__all__ = [
    "looks_like_endpoint",
    "sniff_provider",
    "normalize_endpoint",
    "mask_secret",
]
