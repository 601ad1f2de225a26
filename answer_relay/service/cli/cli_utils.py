# -*- coding: utf-8 -*-
"""Utility helpers shared by the CLI.

Functions
---------
- ``parse_verbosity(value)``: Map user strings and synonyms to a canonical
  logging level name.
- ``emit(payload, as_json)``: Print an answer or error for the terminal.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


def parse_verbosity(value: str) -> Optional[str]:
    """Parse a user-provided verbosity string into a canonical level.

    Accepted values (case-insensitive):
    - Canonical: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - Synonyms: verbose->DEBUG; med/medium/warn->WARNING; quiet->ERROR;
      silent->CRITICAL

    Returns ``None`` if the value is not recognized.
    """
    v = value.strip().lower()
    mapping = {
        "debug": "DEBUG",
        "verbose": "DEBUG",
        "info": "INFO",
        "warning": "WARNING",
        "warn": "WARNING",
        "medium": "WARNING",
        "med": "WARNING",
        "error": "ERROR",
        "quiet": "ERROR",
        "critical": "CRITICAL",
        "silent": "CRITICAL",
    }
    return mapping.get(v)


def emit(envelope: Dict[str, Any], as_json: bool) -> None:
    """Print a response envelope: answers to stdout, errors to stderr."""
    if as_json:
        stream = sys.stdout if envelope.get("success") else sys.stderr
        print(json.dumps(envelope, ensure_ascii=False), file=stream)
        return
    if envelope.get("success"):
        result = envelope.get("result") or {}
        print(result.get("text", "") if isinstance(result, dict) else result)
    else:
        print(f"error ({envelope.get('errorKind', 'unknown')}): {envelope.get('error')}", file=sys.stderr)
