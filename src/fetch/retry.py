"""Retry executor with exponential backoff."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

from src.fetch.constants import (
    COMPONENT_RETRY,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
)
from src.fetch.redact import redact_url_credentials


logger = structlog.get_logger()

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
Sleeper = Callable[[float], None]


@dataclass(frozen=True)
class RetryAttempt:
    """One failed attempt, kept only for logging within a single call.

    Attributes:
        attempt: 1-based attempt number.
        error: The failure raised by the attempt.
        delay_ms: Backoff before the next attempt (0 when none follows).
    """

    attempt: int
    error: BaseException
    delay_ms: int

    def describe(self) -> str:
        """Redacted one-line description of the error."""
        return redact_url_credentials(f"{type(self.error).__name__}: {self.error}")


def backoff_delay_ms(attempt: int, base_delay_ms: int) -> int:
    """Calculate the wait after a failed attempt.

    Pure exponential backoff without jitter: base * 2^(attempt - 1).

    Args:
        attempt: 1-based number of the attempt that just failed.
        base_delay_ms: Delay after the first failure.

    Returns:
        Delay in milliseconds.
    """
    return base_delay_ms * (2 ** (attempt - 1))


def retry_call(
    operation: Callable[[int], T],
    is_retryable: RetryPredicate,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    *,
    sleep: Sleeper = time.sleep,
    log: structlog.stdlib.BoundLogger | None = None,
) -> T:
    """Run an operation, retrying transient failures with backoff.

    The operation receives the 1-based attempt number. A failure stops
    the loop when it is not retryable or when the attempt budget is
    spent; the last error is re-raised unchanged. Waiting blocks only
    the calling thread.

    Args:
        operation: Callable invoked once per attempt.
        is_retryable: Predicate classifying failures as transient.
        max_attempts: Attempt budget; 0 and 1 both mean a single attempt.
        base_delay_ms: Backoff after the first failure.
        sleep: Sleep function taking seconds, injectable for tests.
        log: Bound logger to report failures on.

    Returns:
        The operation's result.
    """
    log = log or logger.bind(component=COMPONENT_RETRY)
    attempts = max(1, max_attempts)

    attempt = 1
    while True:
        try:
            return operation(attempt)
        except Exception as error:
            retryable = is_retryable(error)
            will_retry = retryable and attempt < attempts
            record = RetryAttempt(
                attempt=attempt,
                error=error,
                delay_ms=backoff_delay_ms(attempt, base_delay_ms) if will_retry else 0,
            )

            if not will_retry:
                log.warning(
                    "attempt_failed_final",
                    attempt=record.attempt,
                    max_attempts=attempts,
                    retryable=retryable,
                    delay_ms=record.delay_ms,
                    error=record.describe(),
                )
                raise

            log.warning(
                "attempt_failed_retrying",
                attempt=record.attempt,
                max_attempts=attempts,
                delay_ms=record.delay_ms,
                error=record.describe(),
            )
            sleep(record.delay_ms / 1000.0)
            attempt += 1
