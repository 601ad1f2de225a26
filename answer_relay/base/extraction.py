"""Answer text extraction strategies.

Each strategy is a pure ``(payload) -> str | None`` function that knows one
response envelope shape. Strategies never raise; a shape they do not
recognize simply yields ``None``.

Order
-----
``DISCOVERY_STRATEGIES`` fixes the precedence used when the response shape
of a self-hosted endpoint is unknown:

1. ``candidates[0].content.parts[0].text`` (generateContent)
2. ``choices[0].message.content`` (chat completions)
3. ``choices[0].text`` (legacy completions)
4. flat ``content``
5. flat ``text``
6. ``message`` as a string or ``{"content": ...}``
7. flat ``response`` (Ollama style)

The fixed-provider clients use the single strategy matching their contract.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Tuple

Extractor = Callable[[Any], Optional[str]]


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def extract_generate_content(payload: Any) -> Optional[str]:
    """``{"candidates": [{"content": {"parts": [{"text": ...}]}}]}``"""
    candidate = _first(_get(payload, "candidates"))
    part = _first(_get(_get(candidate, "content"), "parts"))
    return _text(_get(part, "text"))


def extract_chat_message(payload: Any) -> Optional[str]:
    """``{"choices": [{"message": {"content": ...}}]}``"""
    choice = _first(_get(payload, "choices"))
    return _text(_get(_get(choice, "message"), "content"))


def extract_choice_text(payload: Any) -> Optional[str]:
    choice = _first(_get(payload, "choices"))
    return _text(_get(choice, "text"))


def extract_flat_content(payload: Any) -> Optional[str]:
    return _text(_get(payload, "content"))


def extract_flat_text(payload: Any) -> Optional[str]:
    return _text(_get(payload, "text"))


def extract_message(payload: Any) -> Optional[str]:
    """``{"message": "..."}`` or ``{"message": {"content": "..."}}``"""
    message = _get(payload, "message")
    if isinstance(message, dict):
        return _text(message.get("content"))
    return _text(message)


def extract_response(payload: Any) -> Optional[str]:
    return _text(_get(payload, "response"))


DISCOVERY_STRATEGIES: Tuple[Extractor, ...] = (
    extract_generate_content,
    extract_chat_message,
    extract_choice_text,
    extract_flat_content,
    extract_flat_text,
    extract_message,
    extract_response,
)


def extract_first(payload: Any, strategies: Sequence[Extractor] = DISCOVERY_STRATEGIES) -> Optional[str]:
    """Return the first non-empty text produced by ``strategies`` in order."""
    for strategy in strategies:
        text = strategy(payload)
        if text is not None:
            return text
    return None


__all__ = [
    "Extractor",
    "DISCOVERY_STRATEGIES",
    "extract_first",
    "extract_generate_content",
    "extract_chat_message",
    "extract_choice_text",
    "extract_flat_content",
    "extract_flat_text",
    "extract_message",
    "extract_response",
]
