"""answer_relay.config.defaults
============================

Central place for small, stable default values used across the answer_relay
package and its service layer. These defaults can be overridden via
environment variables or an external configuration file, but provide sensible
fallbacks for local development and tests.

This module intentionally avoids importing from other answer_relay packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Provider identifiers ----
PROVIDER_GEMINI = "gemini"
PROVIDER_CHATGPT = "chatgpt"
PROVIDER_CUSTOM = "custom"
DEFAULT_PROVIDER = PROVIDER_GEMINI

# ---- Provider-specific defaults ----
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"

CHATGPT_DEFAULT_MODEL = "gpt-3.5-turbo"
CHATGPT_DEFAULT_BASE_URL = "https://api.openai.com"

# Model sent in probe bodies for self-hosted endpoints (many OpenAI-compatible
# proxies reject requests without one).
CUSTOM_DEFAULT_MODEL = "gpt-3.5-turbo"

# ---- Custom endpoint discovery ----
# Ordered suffixes appended to the user's endpoint URL. The order is inherited
# behavior and must stay stable: it decides which backend shape is tried first.
CUSTOM_ENDPOINT_CANDIDATE_PATHS = (
    "",
    "/v1/chat/completions",
    "/chat/completions",
    "/v1beta/models/{model}:generateContent",
    "/v1/models/{model}:generateContent",
    "/api/chat",
)

# ---- Settings storage keys ----
STORAGE_KEY_SECRET = "apiKey"  # pragma: allowlist secret - storage key name
STORAGE_KEY_PROVIDER = "aiProvider"

# ---- Service / HTTP layer ----
SERVICE_DEFAULT_HOST = "127.0.0.1"
SERVICE_DEFAULT_PORT = 8091
# Default CORS origins for the FastAPI dev server (comma-separated string)
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"

# ---- SQLite settings store ----
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


__all__ = [
    "PROVIDER_GEMINI",
    "PROVIDER_CHATGPT",
    "PROVIDER_CUSTOM",
    "DEFAULT_PROVIDER",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "CHATGPT_DEFAULT_MODEL",
    "CHATGPT_DEFAULT_BASE_URL",
    "CUSTOM_DEFAULT_MODEL",
    "CUSTOM_ENDPOINT_CANDIDATE_PATHS",
    "STORAGE_KEY_SECRET",
    "STORAGE_KEY_PROVIDER",
    "SERVICE_DEFAULT_HOST",
    "SERVICE_DEFAULT_PORT",
    "SERVICE_CORS_DEFAULT_ORIGINS",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
