from __future__ import annotations

import pytest

from answer_relay.base.credentials import (
    looks_like_endpoint,
    mask_secret,
    normalize_endpoint,
    sniff_provider,
)
from answer_relay.base.kinds import ProviderKind
from answer_relay.base.models import Credential


@pytest.mark.parametrize(
    "raw",
    [
        "https://llm.internal.example.com",
        "http://localhost:11434/",
        "llm.example.org",
        "proxy.example.com:8443/api",
    ],
)
def test_endpoint_shaped_secrets_route_to_custom(raw):
    assert looks_like_endpoint(raw)  # nosec B101
    assert sniff_provider(raw, ProviderKind.CHATGPT) is ProviderKind.CUSTOM  # nosec B101


@pytest.mark.parametrize("raw", ["AIzaSyD-not-a-real-key-123", "sk-proj-abc123", ""])
def test_key_shaped_secrets_follow_selection(raw):
    assert not looks_like_endpoint(raw)  # nosec B101
    assert sniff_provider(raw, "chatgpt") is ProviderKind.CHATGPT  # nosec B101
    assert sniff_provider(raw, None) is ProviderKind.GEMINI  # nosec B101


def test_key_shaped_secret_with_custom_selection_falls_back_to_gemini():
    assert sniff_provider("sk-abc123", ProviderKind.CUSTOM) is ProviderKind.GEMINI  # nosec B101


def test_normalize_endpoint():
    assert normalize_endpoint("llm.example.org/") == "https://llm.example.org"  # nosec B101
    assert normalize_endpoint(" http://host:8080/base/ ") == "http://host:8080/base"  # nosec B101


def test_mask_secret():
    assert mask_secret("sk-1234567890abcdef") == "sk-12345...cdef"  # nosec B101
    assert mask_secret("short") == "*****"  # nosec B101
    assert mask_secret(None) == ""  # nosec B101


def test_credential_from_raw_strips_and_hides_secret():
    cred = Credential.from_raw("  sk-1234567890abcdef  ", "chatgpt")
    assert cred.raw == "sk-1234567890abcdef"  # nosec B101
    assert cred.provider is ProviderKind.CHATGPT  # nosec B101
    assert "1234567890ab" not in repr(cred)  # nosec B101
