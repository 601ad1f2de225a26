from __future__ import annotations

import functools
from typing import Awaitable, Callable, TypeVar

from ..errors import AnswerError, as_answer_error

T = TypeVar("T")


def with_error_handling(provider: str = "unknown"):
    """Guarantee that a coroutine only ever fails with :class:`AnswerError`.

    Unclassified exceptions are classified once at this boundary and chained
    to the original exception.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except AnswerError:
                raise
            except Exception as e:
                raise as_answer_error(e, provider=provider) from e

        return wrapper

    return decorator


__all__ = ["with_error_handling"]
