"""
Answer pipeline base package.

Exports the provider-agnostic pieces shared by every backend client, the
answer service and the message bus:
- Models: immutable request/credential/result values
- Errors: the closed ``ErrorKind`` taxonomy and the total classifier
- Timeouts: centralized deadlines and recovery delays
- Factory: lazy creation of backend clients by provider tag
"""

from .errors import AnswerError, ErrorKind, classify
from .factory import ClientFactory, UnknownProviderError
from .models import (
    AnswerResult,
    Credential,
    ImageRefs,
    Mode,
    OptionImage,
    ProbeAttempt,
    ProbeSchema,
    ProviderKind,
    Request,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Mode",
    "ProviderKind",
    "ProbeSchema",
    "OptionImage",
    "ImageRefs",
    "Request",
    "Credential",
    "AnswerResult",
    "ProbeAttempt",
    # Errors
    "ErrorKind",
    "AnswerError",
    "classify",
    # Factory
    "ClientFactory",
    "UnknownProviderError",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
]
