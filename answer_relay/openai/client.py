"""ChatGPT backend client.

Speaks the OpenAI Chat Completions REST contract directly over ``httpx``:

    POST {base}/v1/chat/completions
    Authorization: Bearer <api key>
    {"model": ..., "messages": [{"role": "user", "content": prompt}],
     "temperature": ..., "max_tokens": ...}

and reads ``choices[0].message.content`` from the response.

Status handling beyond the shared classifier:
- 429 surfaces the ``Retry-After`` header verbatim in the message.
- 402 and 500 point the user at account billing, since OpenAI reports
  exhausted credits that way.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..base.errors import AnswerError, ErrorKind
from ..base.extraction import extract_chat_message
from ..base.kinds import Mode, ProviderKind
from ..base.models import Credential
from ..base.prompt import generation_profile
from ..base.provider_base import HttpProviderBase, error_detail

_BILLING_STATUSES = (402, 500)


def build_chat_body(prompt: str, mode: Mode, model: str) -> Dict[str, Any]:
    """Return a chat completions request body for ``prompt``."""
    body: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
    }
    body |= generation_profile(ProviderKind.CHATGPT, mode)
    return body


class ChatGPTClient(HttpProviderBase):
    """Fixed-format client for the OpenAI Chat Completions API."""

    provider = ProviderKind.CHATGPT

    def endpoint(self) -> str:
        return f"{self._base_url}/v1/chat/completions"

    async def _send(self, prompt: str, mode: Mode, credential: Credential) -> httpx.Response:
        return await self._post(
            self.endpoint(),
            build_chat_body(prompt, mode, self._model),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {credential.raw}",
            },
        )

    def _extract(self, payload: Any) -> Optional[str]:
        return extract_chat_message(payload)

    def _retry_after(self, response: httpx.Response) -> Optional[str]:
        value = response.headers.get("retry-after")
        return value.strip() if value and value.strip() else None

    def _status_error(self, response: httpx.Response) -> AnswerError:
        if response.status_code not in _BILLING_STATUSES:
            return super()._status_error(response)
        detail = error_detail(response) or "Unknown error"
        return AnswerError(
            kind=ErrorKind.UNKNOWN,
            message=f"API error: {detail}. Please check your OpenAI account billing and credits.",
            provider=self.provider_name,
            status=response.status_code,
        )


__all__ = ["ChatGPTClient", "build_chat_body"]
