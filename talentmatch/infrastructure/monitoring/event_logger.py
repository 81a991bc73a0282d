"""Turns resilience domain events into log records."""

import logging
from dataclasses import asdict

from talentmatch.domain.events.api_events import (
    DomainEvent,
    ProviderCallCompleted,
    ProviderFallbackTriggered,
    RequestDeferred,
    RetryScheduled,
)

logger = logging.getLogger(__name__)


def log_event(event: DomainEvent) -> None:
    """Event handler suitable for the throttle, retry and fallback services."""
    data = asdict(event)
    if isinstance(event, RetryScheduled):
        logger.warning(
            f"Throttling detected, retrying in {event.delay_seconds:.2f}s "
            f"(attempt {event.attempt_number}/{event.max_attempts})",
            extra={"data": data},
        )
    elif isinstance(event, ProviderFallbackTriggered):
        logger.warning(
            f"{event.primary_provider} failed, falling back to {event.fallback_provider}: {event.reason}",
            extra={"data": data},
        )
    elif isinstance(event, RequestDeferred):
        logger.info(
            f"Rate limiting: waiting {event.wait_time_seconds:.2f}s before next request",
            extra={"data": data},
        )
    elif isinstance(event, ProviderCallCompleted):
        logger.info(
            f"Resume parsed by {event.provider} in {event.duration_ms:.0f}ms (fallback={event.fallback})",
            extra={"data": data},
        )
    else:
        logger.debug(f"EVENT: {event}")
