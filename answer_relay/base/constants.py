"""Base shared constants for the answer pipeline.

Central location to avoid scattering user-facing strings and sentinel values.

Security
--------
This module contains only generic messages and sentinel strings. There are no
credentials or tokens embedded.

# pragma: allowlist secret
"""
from __future__ import annotations

# User-facing failure messages (safe for direct display)
EXTENSION_RELOADED = "Extension was reloaded. Please refresh the page."
API_KEY_MISSING = "Please set up your API key in the extension popup first."  # pragma: allowlist secret
API_KEY_INVALID = "Invalid API key. Please check your setup."  # pragma: allowlist secret
REQUEST_TIMEOUT = "Request timed out. Please try again."
RATE_LIMIT = "Rate limit exceeded. Please try again later."
NETWORK_ERROR = "Network error. Please check your internet connection."
UNKNOWN_ERROR = "An unexpected error occurred. Please try again."
INVALID_RESPONSE_FORMAT = "Invalid API response format - no valid answer found"
EMPTY_REQUEST = "Nothing to answer: select some text or an image first."
CALL_IN_PROGRESS = "An answer is already being fetched. Please wait."

# Probe message used when verifying a credential before it is saved
VERIFY_PROMPT = 'Hello, please respond with "API test successful"'

__all__ = [
    "EXTENSION_RELOADED",
    "API_KEY_MISSING",
    "API_KEY_INVALID",
    "REQUEST_TIMEOUT",
    "RATE_LIMIT",
    "NETWORK_ERROR",
    "UNKNOWN_ERROR",
    "INVALID_RESPONSE_FORMAT",
    "EMPTY_REQUEST",
    "CALL_IN_PROGRESS",
    "VERIFY_PROMPT",
]
