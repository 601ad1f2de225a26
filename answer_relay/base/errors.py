"""Unified answer pipeline error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``answer_relay.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_kind import ErrorKind, RETRYABLE_KINDS
from .errors_parts.answer_error import AnswerError
from .errors_parts.classification import (
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
