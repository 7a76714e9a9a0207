"""Bounded retry with exponential backoff"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, List, Optional, TypeVar

from .classification import TRANSIENT_STATUSES

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try, how long to wait, and which statuses to retry

    Attributes:
        max_attempts: Total attempts including the first
        initial_delay: Seconds to wait before the second attempt
        multiplier: Factor applied to the delay after each retry
        retryable_statuses: HTTP statuses that count as transient
    """
    max_attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0
    retryable_statuses: FrozenSet[int] = field(default=TRANSIENT_STATUSES)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.multiplier < 1:
            raise ValueError("initial_delay must be >= 0 and multiplier >= 1")

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses

    def delay_after(self, attempt_number: int) -> Optional[float]:
        """Delay before the attempt following attempt_number, or None if it was the last"""
        if attempt_number >= self.max_attempts:
            return None
        return self.initial_delay * (self.multiplier ** (attempt_number - 1))


DEFAULT_UPLOAD_POLICY = RetryPolicy()


@dataclass
class UploadAttempt:
    """One pass through the retry loop"""
    attempt_number: int
    outcome: str
    delay_before_next_attempt: Optional[float] = None


class TransientError(Exception):
    """Raised by an operation to ask for another attempt"""

    def __init__(self, message: str, status_code: Optional[int] = None, failure=None):
        super().__init__(message)
        self.status_code = status_code
        self.failure = failure


class RetryExhausted(Exception):
    """Every attempt failed with a transient error"""

    def __init__(self, attempts: List[UploadAttempt], last_error: TransientError):
        super().__init__(f"Gave up after {len(attempts)} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


async def run_with_retry(
    operation: Callable[[int], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_UPLOAD_POLICY,
    sleep: SleepFunc = asyncio.sleep,
    on_attempt: Optional[Callable[[UploadAttempt], None]] = None
) -> T:
    """Run operation until it succeeds, fails terminally, or attempts run out

    The operation receives the 1-based attempt number. It signals a
    retryable failure by raising TransientError; any other exception is
    terminal and propagates immediately. Waiting uses ``sleep`` so a
    cancelled task stops before the next attempt.

    Raises:
        RetryExhausted: If the last allowed attempt also raised TransientError
    """
    attempts: List[UploadAttempt] = []

    for attempt_number in range(1, policy.max_attempts + 1):
        try:
            result = await operation(attempt_number)
        except TransientError as e:
            delay = policy.delay_after(attempt_number)
            attempt = UploadAttempt(attempt_number, f"transient: {e}", delay)
            attempts.append(attempt)
            if on_attempt:
                on_attempt(attempt)

            if delay is None:
                raise RetryExhausted(attempts, e) from e

            logger.warning(
                f"Attempt {attempt_number}/{policy.max_attempts} failed ({e}), retrying in {delay:.1f}s"
            )
            await sleep(delay)
        else:
            attempt = UploadAttempt(attempt_number, "success")
            attempts.append(attempt)
            if on_attempt:
                on_attempt(attempt)
            return result

    # Unreachable: the last attempt either returns or raises
    raise AssertionError("retry loop exited without a result")
