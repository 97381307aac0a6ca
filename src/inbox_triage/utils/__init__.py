"""Utility functions for Inbox Triage."""

from __future__ import annotations

import time
from functools import wraps
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


def retry_on_failure(
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
    retry_if: Callable[[BaseException], bool] | None = None,
) -> Callable[[F], F]:
    """Decorator to retry a blocking function on failure with exponential backoff.

    Intended for synchronous Gmail API requests, which run in worker threads.

    Args:
        max_retries: Maximum number of retry attempts.
        delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay after each retry.
        exceptions: Exception types that trigger a retry. Anything else
            propagates immediately.
        retry_if: Optional predicate over a caught exception. When it returns
            False the exception propagates without further attempts.

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            current_delay = delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if retry_if is not None and not retry_if(e):
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "function_retry_exhausted",
                            function=getattr(func, "__name__", repr(func)),
                            attempts=max_retries + 1,
                            error=str(e),
                        )
                        raise
                    logger.warning(
                        "function_retry",
                        function=getattr(func, "__name__", repr(func)),
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay=current_delay,
                        error=str(e),
                    )
                    time.sleep(current_delay)
                    current_delay *= backoff

            raise AssertionError("unreachable")

        return wrapper  # type: ignore

    return decorator
