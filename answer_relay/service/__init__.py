"""Service layer: answer service, HTTP app and CLI.

The FastAPI app is not imported here so that the answer service and CLI stay
usable without loading the web stack.
"""

from .answer_service import AnswerService

__all__ = ["AnswerService"]
