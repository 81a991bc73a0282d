"""Service for executing API calls with automatic retries.

Implements exponential backoff with random jitter for transient throttling
errors. Any other error, and a throttling error on the final attempt, is
propagated to the caller unchanged.
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

from talentmatch.domain.errors import error_message, is_throttled
from talentmatch.domain.events.api_events import DomainEvent, EventHandler, RetryScheduled
from talentmatch.domain.models.common import BackoffPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0
DEFAULT_MAX_JITTER_SECONDS = 1.0

T = TypeVar("T")


class RetryWithBackoff:
    """Retries an async operation on throttling errors with exponential backoff."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay_s: float = DEFAULT_BASE_DELAY_SECONDS,
        max_jitter_s: float = DEFAULT_MAX_JITTER_SECONDS,
        max_delay_s: Optional[float] = None,
        retry_predicate: Callable[[BaseException], bool] = is_throttled,
        event_handler: Optional[EventHandler] = None,
    ):
        """Initializes the retry policy.

        Args:
            max_retries: Maximum number of retries; up to max_retries + 1 attempts are made.
            base_delay_s: Delay before the first retry, doubled for every further attempt.
            max_jitter_s: Upper bound of the random delay added to each backoff.
            max_delay_s: Optional ceiling for a single backoff delay. None means unbounded.
            retry_predicate: Decides whether an error is transient. Defaults to `is_throttled`.
            event_handler: Optional callback receiving RetryScheduled events.
        """
        if max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {max_retries}")
        self.max_retries = max_retries
        self.base_delay_s = base_delay_s
        self.max_jitter_s = max_jitter_s
        self.max_delay_s = max_delay_s
        self.retry_predicate = retry_predicate
        self.event_handler = event_handler
        logger.debug(
            f"RetryWithBackoff initialized: max_retries={max_retries}, "
            f"base_delay={base_delay_s}s, jitter<={max_jitter_s}s, cap={max_delay_s}"
        )

    @classmethod
    def from_policy(cls, policy: BackoffPolicy, event_handler: Optional[EventHandler] = None) -> "RetryWithBackoff":
        return cls(
            max_retries=policy["max_retries"],
            base_delay_s=policy["base_delay_s"],
            max_jitter_s=policy["max_jitter_s"],
            max_delay_s=policy["max_delay_s"],
            event_handler=event_handler,
        )

    def compute_delay(self, attempt: int) -> float:
        """Backoff before the retry following the given 0-based attempt."""
        delay = self.base_delay_s * (2 ** attempt) + random.uniform(0, self.max_jitter_s)
        if self.max_delay_s is not None:
            delay = min(delay, self.max_delay_s)
        return delay

    async def run(self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Executes the operation, retrying transient failures.

        Args:
            operation: Zero-argument async callable (or one taking *args/**kwargs).

        Returns:
            The operation's result.

        Raises:
            Exception: The operation's error, unchanged, once it is not
                retryable or the attempts are exhausted.
        """
        attempt = 0
        while True:
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                if not self.retry_predicate(e) or attempt >= self.max_retries:
                    raise
                delay = self.compute_delay(attempt)
                self._dispatch(RetryScheduled(
                    attempt_number=attempt + 1,
                    max_attempts=self.max_retries + 1,
                    delay_seconds=delay,
                    error_message=error_message(e),
                ))
                await asyncio.sleep(delay)
                attempt += 1

    def _dispatch(self, event: DomainEvent) -> None:
        if self.event_handler:
            self.event_handler(event)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay_s: float = DEFAULT_BASE_DELAY_SECONDS,
) -> T:
    """Runs `operation` with the default throttling-aware retry policy."""
    return await RetryWithBackoff(max_retries=max_retries, base_delay_s=base_delay_s).run(operation)
