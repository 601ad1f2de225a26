"""
Pydantic DTOs for the Coordinator/ForegroundAgent message envelope.

Purpose
-------
Validate inbound JSON envelopes before they reach the Coordinator so that
malformed messages are answered with a classified ``FORMAT_MISMATCH`` failure
instead of an exception deep inside a handler.

Wire shape
----------
Requests are flat: ``{"action": "...", ...payload}``. Responses are
``{"success": bool, "result"?: any, "error"?: str, "errorKind"?: str}``.
Field names on the wire are camelCase; Python attributes are snake_case.

External dependencies: Pydantic only. No timeouts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import AnswerError, ErrorKind
from ..kinds import Mode
from ..models import ImageRefs, OptionImage, Request

Action = Literal[
    "getCredential",
    "getProvider",
    "solve",
    "solveFromSelection",
    "callCustomEndpoint",
    "ping",
]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OptionImageDTO(_WireModel):
    option: str
    src: str


class ImageRefsDTO(_WireModel):
    question_image: Optional[str] = Field(default=None, alias="questionImage")
    option_images: List[OptionImageDTO] = Field(default_factory=list, alias="optionImages")

    def to_model(self) -> ImageRefs:
        return ImageRefs(
            question_image=self.question_image or None,
            option_images=tuple(OptionImage(option=o.option, src=o.src) for o in self.option_images),
        )


class MessageEnvelope(BaseModel):
    """Inbound envelope: an action name plus an arbitrary flat payload."""

    model_config = ConfigDict(extra="allow")

    action: Action

    def payload(self) -> Dict[str, Any]:
        """Return every field except ``action``."""
        return dict(self.model_extra or {})


class SolvePayload(_WireModel):
    """Payload of ``solve``, ``callCustomEndpoint`` and ``solveFromSelection``.

    Rules:
        - ``mode`` accepts ``"qa"`` or ``"coding"``; anything else falls back
          to ``"qa"``.
        - Emptiness is not rejected here; the answer service owns that rule.
    """

    question_text: str = Field(default="", alias="questionText")
    custom_prompt: str = Field(default="", alias="customPrompt")
    mode: Mode = Mode.QA
    images: Optional[ImageRefsDTO] = None
    provider: Optional[str] = None
    endpoint_url: Optional[str] = Field(default=None, alias="endpointUrl")

    @field_validator("mode", mode="before")
    @classmethod
    def _lenient_mode(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in (m.value for m in Mode):
            return value.strip().lower()
        if isinstance(value, Mode):
            return value
        return Mode.QA

    @field_validator("question_text", "custom_prompt", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_request(self) -> Request:
        images = self.images.to_model() if self.images else None
        return Request(
            question_text=self.question_text,
            custom_prompt=self.custom_prompt,
            mode=self.mode,
            images=images if images and not images.is_empty() else None,
        )


class ResponseEnvelope(_WireModel):
    """Outbound envelope. ``success`` is the only authoritative field."""

    success: bool
    result: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = Field(default=None, alias="errorKind")

    @classmethod
    def ok(cls, result: Any = None) -> "ResponseEnvelope":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: AnswerError) -> "ResponseEnvelope":
        return cls(success=False, error=error.message, error_kind=error.kind)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "Action",
    "OptionImageDTO",
    "ImageRefsDTO",
    "MessageEnvelope",
    "SolvePayload",
    "ResponseEnvelope",
]
