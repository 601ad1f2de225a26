"""Models parts package public surface.

Re-exports individual models so callers can import from
`answer_relay.base.models_parts` if needed, while `answer_relay.base.models`
remains the primary stable import path.
"""

from ..kinds import Mode, ProbeSchema, ProviderKind
from .option_image import OptionImage
from .image_refs import ImageRefs
from .request import Request
from .credential import Credential
from .answer_result import AnswerResult
from .probe_attempt import ProbeAttempt

__all__ = [
    "Mode",
    "ProbeSchema",
    "ProviderKind",
    "OptionImage",
    "ImageRefs",
    "Request",
    "Credential",
    "AnswerResult",
    "ProbeAttempt",
]
