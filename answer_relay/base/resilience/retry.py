from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Protocol, TypeVar

from ..errors import RETRYABLE_KINDS, AnswerError, ErrorKind

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: AnswerError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Bounded retry policy shared by the answer service and the message bus.

    ``max_attempts`` counts the first try; ``delay_seconds`` is a fixed pause
    between attempts.
    """

    max_attempts: int = 1
    delay_seconds: float = 1.0
    retryable_kinds: frozenset[ErrorKind] = RETRYABLE_KINDS
    attempt_logger: AttemptLogger | None = None

    @property
    def retries(self) -> int:
        return max(self.max_attempts - 1, 0)

    def delays(self) -> Iterable[float]:
        for _ in range(self.retries):
            yield self.delay_seconds

    def should_retry(self, error: AnswerError) -> bool:
        return error.kind in self.retryable_kinds


DEFAULT_RETRY_CONFIG = RetryConfig()


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying the bounded retry policy to a coroutine.

    - Retries only on configured retryable error kinds
    - Fixed delay between attempts
    - Preserves original function signature
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            last_exc: AnswerError | None = None
            # final attempt has delay None
            for attempt, delay in enumerate(list(config.delays()) + [None]):
                try:
                    result = await func(*args, **kwargs)
                except AnswerError as e:
                    last_exc = e
                    if config.attempt_logger:
                        config.attempt_logger(
                            attempt=attempt,
                            max_attempts=config.max_attempts,
                            delay=delay,
                            error=e,
                        )
                    if config.should_retry(e) and delay is not None:
                        await asyncio.sleep(delay)
                        continue
                    raise
                if config.attempt_logger:
                    config.attempt_logger(
                        attempt=attempt,
                        max_attempts=config.max_attempts,
                        delay=None,
                        error=None,
                    )
                return result
            if last_exc is None:  # pragma: no cover - defensive
                raise RuntimeError("retry: reached terminal state without captured exception")
            raise last_exc

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "retry",
]
