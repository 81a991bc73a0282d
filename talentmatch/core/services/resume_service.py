"""Application service for resume parsing.

Composes the resilience utilities around the provider adapters:
the primary provider is paced by a RequestThrottle and retried by
RetryWithBackoff, and ProviderFallback hands failed requests to the
secondary provider.
"""

import logging
import time
from typing import List, Optional

from talentmatch.domain.errors import ProviderConfigurationError
from talentmatch.domain.events.api_events import EventHandler, ProviderCallCompleted
from talentmatch.domain.interfaces.resume_parser import ResumeParser
from talentmatch.domain.models.common import AnnotatedResult, ResumeText
from talentmatch.domain.models.resume import ResumeParsingOptions, ResumeParsingResult
from talentmatch.infrastructure.resilience.provider_fallback import ProviderFallback
from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle

logger = logging.getLogger(__name__)


class ResumeParsingService:
    """Parses resumes with a primary provider and a fallback provider."""

    def __init__(
        self,
        primary_parser: ResumeParser,
        secondary_parser: Optional[ResumeParser],
        throttle: RequestThrottle,
        fallback: ProviderFallback,
        default_options: Optional[ResumeParsingOptions] = None,
        event_handler: Optional[EventHandler] = None,
    ):
        self.primary_parser = primary_parser
        self.secondary_parser = secondary_parser
        self.throttle = throttle
        self.fallback = fallback
        self.default_options = default_options or ResumeParsingOptions()
        self.event_handler = event_handler

    @property
    def provider_names(self) -> List[str]:
        names = [self.primary_parser.PROVIDER_NAME]
        if self.secondary_parser is not None:
            names.append(self.secondary_parser.PROVIDER_NAME)
        return names

    @staticmethod
    def _validate(text: ResumeText) -> ResumeText:
        if not text or not text.strip():
            raise ValueError("Resume text is required")
        return text

    async def _parse_primary(self, text: ResumeText, options: ResumeParsingOptions) -> ResumeParsingResult:
        return await self.throttle.submit(self.primary_parser.parse_resume, text, options)

    async def _parse_secondary(self, text: ResumeText, options: ResumeParsingOptions) -> ResumeParsingResult:
        if self.secondary_parser is None:
            raise ProviderConfigurationError("No fallback provider configured")
        return await self.secondary_parser.parse_resume(text, options)

    async def parse_smart(
        self, text: ResumeText, options: Optional[ResumeParsingOptions] = None
    ) -> AnnotatedResult[ResumeParsingResult]:
        """Parses with the primary provider, falling back to the secondary on failure.

        Raises:
            ValueError: If the text is empty.
            ProviderFallbackError: If both providers fail.
        """
        self._validate(text)
        options = options or self.default_options
        start_time = time.perf_counter()

        result = await self.fallback.parse(
            text,
            lambda: self._parse_primary(text, options),
            lambda: self._parse_secondary(text, options),
        )

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Smart resume parsing completed in {duration_ms:.0f}ms using {result.provider}")
        if self.event_handler:
            self.event_handler(ProviderCallCompleted(
                provider=result.provider, fallback=result.fallback, duration_ms=duration_ms,
            ))
        return result

    async def parse_with(
        self, provider: str, text: ResumeText, options: Optional[ResumeParsingOptions] = None
    ) -> ResumeParsingResult:
        """Parses with one named provider, without fallback or retries."""
        self._validate(text)
        options = options or self.default_options
        if provider == self.primary_parser.PROVIDER_NAME:
            return await self._parse_primary(text, options)
        if self.secondary_parser is not None and provider == self.secondary_parser.PROVIDER_NAME:
            return await self._parse_secondary(text, options)
        raise ValueError(f"Unknown provider '{provider}'. Available: {', '.join(self.provider_names)}")

