"""Primary/secondary provider orchestration.

Prefers a primary provider (executed through RetryWithBackoff) and
transparently substitutes a secondary provider when the primary fails. The
returned result reports which provider served the request and why a
fallback happened. There is exactly one fallback tier.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from talentmatch.domain.errors import ProviderFallbackError, error_message
from talentmatch.domain.events.api_events import DomainEvent, EventHandler, ProviderFallbackTriggered
from talentmatch.domain.models.common import PRIMARY_PROVIDER, SECONDARY_PROVIDER, AnnotatedResult
from talentmatch.infrastructure.resilience.api_retry import RetryWithBackoff

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderFallback:
    """Runs a primary call with retries, falling back to a secondary call once."""

    def __init__(
        self,
        retry: Optional[RetryWithBackoff] = None,
        primary_name: str = PRIMARY_PROVIDER,
        secondary_name: str = SECONDARY_PROVIDER,
        event_handler: Optional[EventHandler] = None,
    ):
        self.retry = retry or RetryWithBackoff()
        self.primary_name = primary_name
        self.secondary_name = secondary_name
        self.event_handler = event_handler

    async def parse(
        self,
        input_text: str,
        primary: Callable[[], Awaitable[T]],
        secondary: Callable[[], Awaitable[T]],
    ) -> AnnotatedResult[T]:
        """Serves a parse request from the primary provider, or the secondary on failure.

        Args:
            input_text: The text being parsed (used for logging only).
            primary: Zero-argument async callable for the primary provider.
            secondary: Zero-argument async callable for the secondary provider.

        Returns:
            The result annotated with the serving provider and fallback details.

        Raises:
            ProviderFallbackError: If both providers fail.
        """
        logger.debug(f"Attempting {self.primary_name} parsing ({len(input_text)} chars)")
        try:
            result = await self.retry.run(primary)
        except Exception as primary_error:
            reason = error_message(primary_error)
            logger.warning(f"{self.primary_name} failed ({reason}), falling back to {self.secondary_name}")
            self._dispatch(ProviderFallbackTriggered(
                reason=reason,
                primary_provider=self.primary_name,
                fallback_provider=self.secondary_name,
            ))
            return await self._run_secondary(primary_error, secondary)

        return AnnotatedResult(result=result, provider=self.primary_name, fallback=False)

    async def _run_secondary(
        self, primary_error: Exception, secondary: Callable[[], Awaitable[Any]]
    ) -> AnnotatedResult:
        try:
            result = await secondary()
        except Exception as secondary_error:
            logger.error(f"{self.secondary_name} fallback also failed: {error_message(secondary_error)}")
            raise ProviderFallbackError(
                primary_error,
                secondary_error,
                primary_name=self.primary_name,
                secondary_name=self.secondary_name,
            ) from secondary_error

        return AnnotatedResult(
            result=result,
            provider=self.secondary_name,
            fallback=True,
            fallback_reason=error_message(primary_error),
        )

    def _dispatch(self, event: DomainEvent) -> None:
        if self.event_handler:
            self.event_handler(event)
