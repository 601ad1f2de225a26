"""answer_relay package

Resilient answer-acquisition pipeline: a router over two fixed AI backends
plus an auto-discovered self-hosted endpoint, a cross-context message bus
with recovery by re-injection, and one shared error classification policy.

Public API (re-exported):
    - Version: ``__version__``
    - Models: :class:`Request`, :class:`Credential`, :class:`AnswerResult`
    - Errors: :class:`AnswerError`, :class:`ErrorKind`
    - Entry point: :class:`AnswerService`
    - Factory: :func:`create`
"""

from typing import Any

from .base.errors import AnswerError, ErrorKind
from .base.factory import ClientFactory, UnknownProviderError
from .base.models import AnswerResult, Credential, ImageRefs, Mode, OptionImage, ProviderKind, Request
from .service.answer_service import AnswerService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AnswerError",
    "ErrorKind",
    "AnswerResult",
    "Credential",
    "ImageRefs",
    "Mode",
    "OptionImage",
    "ProviderKind",
    "Request",
    "AnswerService",
    "create",
]


def create(provider: str, **kwargs: Any) -> Any:
    """Instantiate a backend client via :class:`ClientFactory`.

    Raises
    ------
    AnswerError
        ``UNKNOWN`` when the provider is unknown or the client cannot be
        constructed.
    """
    try:
        return ClientFactory.create(provider, **kwargs)
    except UnknownProviderError as e:
        raise AnswerError(kind=ErrorKind.UNKNOWN, message=str(e), provider=str(provider)) from e
