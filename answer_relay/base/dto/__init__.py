"""DTO validation package for the message envelope."""

from .envelope import (
    Action,
    ImageRefsDTO,
    MessageEnvelope,
    OptionImageDTO,
    ResponseEnvelope,
    SolvePayload,
)

__all__ = [
    "Action",
    "ImageRefsDTO",
    "MessageEnvelope",
    "OptionImageDTO",
    "ResponseEnvelope",
    "SolvePayload",
]
