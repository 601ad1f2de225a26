"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `answer_relay.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind, RETRYABLE_KINDS
from .answer_error import AnswerError
from .classification import (
    Classification,
    as_answer_error,
    classify,
    classify_exception,
    classify_status,
    default_message,
    is_context_invalid,
)

__all__ = [
    "ErrorKind",
    "RETRYABLE_KINDS",
    "AnswerError",
    "Classification",
    "as_answer_error",
    "classify",
    "classify_exception",
    "classify_status",
    "default_message",
    "is_context_invalid",
]
