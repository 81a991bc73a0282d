"""Implementation of a request throttle.

Controls the pacing of outgoing requests to a rate-limited API (AWS Bedrock
by default): submitted calls run one at a time, in submission order, and two
consecutive calls never start closer together than a minimum interval.
"""

import asyncio
import functools
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional, Tuple

from talentmatch.domain.events.api_events import DomainEvent, EventHandler, RequestDeferred

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_SECONDS = 2.0

Operation = Callable[[], Awaitable[Any]]


class RequestThrottle:
    """FIFO queue drained by a single task with a fixed minimum start interval."""

    def __init__(
        self,
        min_interval_s: float = DEFAULT_MIN_INTERVAL_SECONDS,
        event_handler: Optional[EventHandler] = None,
    ):
        """Initializes the throttle.

        Args:
            min_interval_s: Minimum number of seconds between the start times
                of two consecutive operations.
            event_handler: Optional callback receiving RequestDeferred events.
        """
        if min_interval_s < 0:
            raise ValueError(f"min_interval_s must be non-negative, got {min_interval_s}")
        self.min_interval_s = min_interval_s
        self.event_handler = event_handler
        self._queue: Deque[Tuple[Operation, asyncio.Future]] = deque()
        self._draining = False
        self._last_start: Optional[float] = None
        self._drain_task: Optional[asyncio.Task] = None
        logger.debug(f"RequestThrottle initialized: min interval {min_interval_s}s")

    @property
    def pending(self) -> int:
        """Number of operations waiting to start."""
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._draining

    def submit(self, operation: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> asyncio.Future:
        """Enqueues an async operation and returns a future for its outcome.

        The operation is queued immediately, so submission order is call
        order. The returned future resolves or raises exactly as the
        operation does. Must be called while an event loop is running.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        if args or kwargs:
            operation = functools.partial(operation, *args, **kwargs)
        self._queue.append((operation, future))

        if not self._draining:
            self._draining = True
            self._drain_task = loop.create_task(self._drain())
        return future

    def _time_until_next_start(self) -> float:
        if self._last_start is None:
            return 0.0
        elapsed = time.monotonic() - self._last_start
        return max(0.0, self.min_interval_s - elapsed)

    async def _drain(self) -> None:
        """Runs queued operations one by one until the queue is empty."""
        try:
            while self._queue:
                operation, future = self._queue.popleft()

                wait_time = self._time_until_next_start()
                while wait_time > 0:
                    logger.debug(f"Throttling: waiting {wait_time:.3f}s before next request ({len(self._queue)} queued)")
                    self._dispatch(RequestDeferred(wait_time_seconds=wait_time, queued_requests=len(self._queue)))
                    await asyncio.sleep(wait_time)
                    wait_time = self._time_until_next_start()

                self._last_start = time.monotonic()
                try:
                    result = await operation()
                except asyncio.CancelledError:
                    future.cancel()
                    raise
                except Exception as e:
                    # Callers that stopped waiting have a done (cancelled) future
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)
        finally:
            self._draining = False

    def _dispatch(self, event: DomainEvent) -> None:
        if self.event_handler:
            self.event_handler(event)

    async def aclose(self) -> None:
        """Waits until every submitted operation has run."""
        while self._drain_task is not None and not self._drain_task.done():
            await self._drain_task

    async def __aenter__(self) -> "RequestThrottle":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
