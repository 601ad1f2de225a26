"""Unified configuration layer for the answer pipeline.

Goals
-----
* Centralize defaults (models, base URLs).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external JSON config file pointed to by ANSWER_RELAY_CONFIG_FILE
    3. Environment variables (e.g. GEMINI_MODEL, CHATGPT_BASE_URL)
    4. Credential from the environment (GEMINI_API_KEY, OPENAI_API_KEY, ...)
    5. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider: str)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_BASE_URL
e.g. GEMINI_MODEL, CHATGPT_BASE_URL, CUSTOM_MODEL.

External Config File (Optional)
-------------------------------
If ANSWER_RELAY_CONFIG_FILE is set to a path, it is loaded as JSON::

    {"gemini": {"model": "gemini-2.0-flash"},
     "chatgpt": {"base_url": "https://proxy.internal"}}

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import (
    CHATGPT_DEFAULT_BASE_URL,
    CHATGPT_DEFAULT_MODEL,
    CUSTOM_DEFAULT_MODEL,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "gemini": {"model": GEMINI_DEFAULT_MODEL, "base_url": GEMINI_DEFAULT_BASE_URL},
    "chatgpt": {"model": CHATGPT_DEFAULT_MODEL, "base_url": CHATGPT_DEFAULT_BASE_URL},
    "custom": {"model": CUSTOM_DEFAULT_MODEL},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _parse_dotenv(text: str) -> Dict[str, str]:
    """Return ``KEY=VALUE`` pairs from dotenv text (comments and blanks skipped)."""
    pairs: Dict[str, str] = {}
    for raw in text.splitlines():
        key, sep, value = raw.strip().partition("=")
        if not sep or key.startswith("#") or not key.strip():
            continue
        pairs[key.strip()] = value.strip().strip("'\"")
    return pairs


def _load_dotenv_once() -> None:
    """Apply ``DOTENV_FILE`` (default ``.env``) to the environment once.

    A variable already set wins unless its value looks like a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = Path(os.getenv("DOTENV_FILE", ".env"))
    if not path.is_file():
        return
    try:
        pairs = _parse_dotenv(path.read_text(encoding="utf-8"))
    except OSError:
        return
    for key, value in pairs.items():
        if key not in os.environ or is_placeholder(os.environ[key]):
            os.environ[key] = value


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("ANSWER_RELAY_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    return out


def reset_config_cache() -> None:
    """Drop the cached external config so the next lookup re-reads it."""
    global _FILE_CACHE
    _FILE_CACHE = None


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> env key -> overrides
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if not cfg.get("api_key"):
        key, _env_name = resolve_provider_key(name)
        if key:
            cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
