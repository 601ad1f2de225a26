"""
Enumerations shared by the answer pipeline models.

``Mode`` selects the generation profile; ``ProviderKind`` tags a credential
with the backend family it routes to; ``ProbeSchema`` names the request body
shape used for one custom-endpoint probe.
"""
from __future__ import annotations

from enum import Enum


class Mode(str, Enum):
    """Answer mode chosen by the foreground collaborator."""

    QA = "qa"
    CODING = "coding"


class ProviderKind(str, Enum):
    """Backend family a credential routes to."""

    GEMINI = "gemini"
    CHATGPT = "chatgpt"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "str | ProviderKind | None", default: "ProviderKind | None" = None) -> "ProviderKind":
        """Parse a loose provider string (case-insensitive) with a fallback."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise


class ProbeSchema(str, Enum):
    """Request body shape used for a custom-endpoint probe."""

    GENERATE_CONTENT = "generate_content"
    CHAT_COMPLETIONS = "chat_completions"


__all__ = ["Mode", "ProviderKind", "ProbeSchema"]
