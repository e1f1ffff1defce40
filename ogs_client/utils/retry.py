# ogs_client/utils/retry.py
"""
Provides an asynchronous retry decorator for transient transport failures.

Transports report a dropped connection or a timeout with the builtin
`ConnectionError` and `TimeoutError`, and an HTTP error answer with
`TransportError`. The first two are always worth another try; a
`TransportError` only when the server itself failed (a 5xx status). Anything
else, such as a 403 or a decoding problem, is raised on the first attempt.
"""
import asyncio
import functools
import random
from typing import Any, Callable, Coroutine, Final, Optional, Tuple, Type, TYPE_CHECKING

import structlog

from ogs_client.exceptions import TransportError
from ogs_client.utils import metrics

if TYPE_CHECKING:
    from ogs_client.config.settings import RetrySettings

logger = structlog.get_logger(__name__)

DEFAULT_TRANSIENT_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
)

# Statuses at or above this are server-side failures.
SERVER_ERROR_STATUS: Final[int] = 500


def is_transient(error: BaseException, exceptions_to_catch: Tuple[Type[Exception], ...]) -> bool:
    """Tells whether `error` is worth retrying."""
    if isinstance(error, exceptions_to_catch):
        return True
    return isinstance(error, TransportError) and error.status is not None and error.status >= SERVER_ERROR_STATUS


def _next_delay(current_delay: float, max_backoff_s: float, jitter_factor: float) -> float:
    jitter = random.uniform(-current_delay * jitter_factor, current_delay * jitter_factor)
    return max(0.0, min(max_backoff_s, current_delay + jitter))


def retry_with_backoff(
    attempts: int = 3,
    initial_backoff_s: float = 0.5,
    max_backoff_s: float = 5.0,
    jitter_factor: float = 0.2,
    exceptions_to_catch: Tuple[Type[Exception], ...] = DEFAULT_TRANSIENT_EXCEPTIONS,
    operation: str = "unknown",
) -> Callable[[Callable[..., Coroutine]], Callable[..., Coroutine]]:
    """
    Retries a coroutine function on transient errors with exponential backoff.

    Args:
        attempts: Maximum number of tries, the first one included.
        initial_backoff_s: Delay before the first retry; doubled after every retry.
        max_backoff_s: Cap for a single delay.
        jitter_factor: Spread applied to each delay, 0.2 meaning up to +/-20%.
        exceptions_to_catch: Exception types always retried. A `TransportError`
            with a 5xx status is retried as well.
        operation: Label for the transient-error counter, usually the REST endpoint.
    """
    def decorator(func: Callable[..., Coroutine]) -> Callable[..., Coroutine]:
        name = getattr(func, "__name__", repr(func))

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_backoff_s
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_transient(e, exceptions_to_catch):
                        raise
                    metrics.TRANSIENT_ERRORS_TOTAL.labels(operation=operation).inc()
                    if attempt >= attempts:
                        logger.error(
                            "Giving up on transient error.",
                            function=name, operation=operation, attempts=attempt, error=repr(e),
                        )
                        raise

                wait_time = _next_delay(delay, max_backoff_s, jitter_factor)
                logger.warning(
                    "Transient error, retrying.",
                    function=name, operation=operation, attempt=attempt,
                    total_attempts=attempts, wait_seconds=round(wait_time, 2),
                )
                await asyncio.sleep(wait_time)
                delay *= 2
                attempt += 1
        return wrapper
    return decorator


def retry_from_settings(
    retry_settings: Optional["RetrySettings"], operation: str
) -> Callable[[Callable[..., Coroutine]], Callable[..., Coroutine]]:
    """Builds a `retry_with_backoff` decorator from a `RetrySettings` block."""
    if retry_settings is None:
        return retry_with_backoff(operation=operation)
    return retry_with_backoff(
        attempts=retry_settings.attempts,
        initial_backoff_s=retry_settings.initial_backoff_s,
        max_backoff_s=retry_settings.max_backoff_s,
        jitter_factor=retry_settings.jitter_factor,
        operation=operation,
    )
