"""
Answer pipeline domain models public surface.

This module re-exports the one-class-per-file implementations under
``answer_relay.base.models_parts`` to keep a single stable import path.
"""

from .kinds import Mode, ProbeSchema, ProviderKind
from .models_parts.option_image import OptionImage
from .models_parts.image_refs import ImageRefs
from .models_parts.request import Request
from .models_parts.credential import Credential
from .models_parts.answer_result import AnswerResult
from .models_parts.probe_attempt import ProbeAttempt

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
