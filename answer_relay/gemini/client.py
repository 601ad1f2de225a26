"""Gemini backend client.

Speaks the ``generateContent`` REST contract directly over ``httpx``:

    POST {base}/v1beta/models/{model}:generateContent?key=<api key>
    {"contents": [{"parts": [{"text": prompt}]}], "generationConfig": {...}}

and reads ``candidates[0].content.parts[0].text`` from the response. The same
body shape is reused by the endpoint discovery client for generateContent
style probes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..base.extraction import extract_generate_content
from ..base.kinds import Mode, ProviderKind
from ..base.models import Credential
from ..base.prompt import generation_profile
from ..base.provider_base import HttpProviderBase


def build_generate_content_body(prompt: str, mode: Mode) -> Dict[str, Any]:
    """Return a generateContent request body for ``prompt``."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation_profile(ProviderKind.GEMINI, mode),
    }


class GeminiClient(HttpProviderBase):
    """Fixed-format client for the Gemini generateContent API."""

    provider = ProviderKind.GEMINI

    def endpoint(self, model: Optional[str] = None) -> str:
        return f"{self._base_url}/v1beta/models/{model or self._model}:generateContent"

    async def _send(self, prompt: str, mode: Mode, credential: Credential) -> httpx.Response:
        return await self._post(
            self.endpoint(),
            build_generate_content_body(prompt, mode),
            headers={"Content-Type": "application/json"},
            params={"key": credential.raw},
        )

    def _extract(self, payload: Any) -> Optional[str]:
        return extract_generate_content(payload)


__all__ = ["GeminiClient", "build_generate_content_body"]
