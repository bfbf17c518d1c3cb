"""Retry logic for source runs with linear backoff.

This module provides a generic retry decorator and the RetryExecutor used by
the run coordinator. Waits between attempts go through a CancellationToken, so
a shutdown signal aborts the remaining retries of the current source instead of
sleeping through them.
"""

import logging
import threading
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 2.0


class CancellationToken:
    """Explicit cancellation signal shared between a run and its waits.

    Once cancelled a token stays cancelled: every later wait returns at once.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Block for up to `seconds`. Returns True if cancelled."""
        return self._event.wait(seconds)


class RetryCancelled(Exception):
    """Raised when a backoff wait is cancelled before the next attempt."""

    def __init__(self, label: str, attempts: int):
        super().__init__(f"{label} cancelled after {attempts} attempt(s)")
        self.label = label
        self.attempts = attempts


def linear_backoff(base_delay: float = BASE_DELAY_SECONDS) -> Callable[[int], float]:
    """Backoff policy: wait base_delay * attempt seconds after a failed attempt."""

    def delay(attempt: int) -> float:
        return base_delay * attempt

    return delay


def retry_with_backoff(
    max_attempts: int = MAX_ATTEMPTS,
    backoff: Optional[Callable[[int], float]] = None,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    cancel_token: Optional[CancellationToken] = None,
    label: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator to retry a function with a pluggable backoff policy.

    Args:
        max_attempts: Total number of attempts, including the first (default: 3)
        backoff: Maps the number of the failed attempt to a delay in seconds
                 (default: linear, 2s then 4s)
        exceptions: Exception types that trigger a retry
        cancel_token: Token whose cancellation aborts a pending wait
        label: Name used in log lines (default: the function name)

    Returns:
        Decorated function that retries on failure

    Raises:
        The last exception, once all attempts are exhausted
        RetryCancelled: If a wait between attempts was cancelled

    Example:
        @retry_with_backoff(max_attempts=3, label="RemoteOK")
        def fetch_jobs():
            return adapter.fetch_and_parse()

        # Attempt 1: immediate
        # Attempt 2: after 2 seconds
        # Attempt 3: after 4 seconds
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    policy = backoff or linear_backoff()

    def decorator(func: F) -> F:
        name = label or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            token = cancel_token or CancellationToken()
            last_exception: Optional[Exception] = None

            for attempt in range(1, max_attempts + 1):
                logger.info(
                    "Attempting %s (attempt %d/%d)",
                    name,
                    attempt,
                    max_attempts,
                    extra={"source": name, "attempt": attempt, "max_attempts": max_attempts},
                )
                try:
                    result = func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    logger.warning(
                        "Attempt %d/%d failed for %s: %s",
                        attempt,
                        max_attempts,
                        name,
                        e,
                        extra={
                            "source": name,
                            "attempt": attempt,
                            "max_attempts": max_attempts,
                            "outcome": "failed",
                            "exception_type": type(e).__name__,
                        },
                    )

                    # Don't wait after the last attempt
                    if attempt < max_attempts:
                        delay = policy(attempt)
                        logger.info(
                            "Waiting %dms before retry...",
                            round(delay * 1000),
                            extra={"source": name, "delay_ms": round(delay * 1000)},
                        )
                        if token.wait(delay):
                            logger.error(
                                "%s interrupted while waiting for retry",
                                name,
                                extra={"source": name, "attempt": attempt},
                            )
                            raise RetryCancelled(name, attempt) from e
                    continue

                logger.info(
                    "Successfully completed %s",
                    name,
                    extra={"source": name, "attempt": attempt, "outcome": "success"},
                )
                return result

            logger.error(
                "All %d attempts failed for %s",
                max_attempts,
                name,
                extra={"source": name, "total_attempts": max_attempts},
            )
            raise last_exception  # type: ignore

        return wrapper  # type: ignore

    return decorator


@dataclass
class RetryOutcome:
    """Result of running one operation under the retry policy.

    Truthy only when the operation eventually succeeded.
    """

    succeeded: bool
    attempts: int
    value: Any = None
    cancelled: bool = False
    error: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return self.succeeded


class RetryExecutor:
    """
    Runs one source's operation with bounded retry, isolating its failure.

    `execute()` never raises for a failing operation: exhaustion and
    cancellation are reported through the returned RetryOutcome so the caller
    can move on to the next source.

    The cancel token is shared by every execute() call and stays cancelled.
    After a shutdown signal, each remaining source still gets its first
    attempt, but a failure is not retried because the backoff wait returns
    at once.
    """

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_DELAY_SECONDS,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.cancel_token = cancel_token or CancellationToken()

    def execute(self, source_name: str, operation: Callable[[], Any]) -> RetryOutcome:
        attempts = 0

        def attempt() -> Any:
            nonlocal attempts
            attempts += 1
            return operation()

        retrying = retry_with_backoff(
            max_attempts=self.max_attempts,
            backoff=linear_backoff(self.base_delay),
            cancel_token=self.cancel_token,
            label=source_name,
        )(attempt)

        try:
            value = retrying()
        except RetryCancelled as e:
            return RetryOutcome(succeeded=False, attempts=attempts, cancelled=True, error=e.__cause__)
        except Exception as e:
            return RetryOutcome(succeeded=False, attempts=attempts, error=e)

        return RetryOutcome(succeeded=True, attempts=attempts, value=value)

    def __repr__(self) -> str:
        return (
            f"RetryExecutor(max_attempts={self.max_attempts}, "
            f"base_delay={self.base_delay})"
        )
