"""Concrete implementation of the ResumeParser interface using the OpenAI API.

Hides the specifics of the OpenAI client library and translates requests/
responses between the domain model and the chat completions format.
"""

import asyncio
import json
import logging
import os
import time
from typing import Any, List, Optional

from openai import APIError, AuthenticationError, OpenAI, RateLimitError

from talentmatch.domain.errors import (
    ProviderConfigurationError,
    ProviderError,
    ResponseParsingError,
    ThrottlingError,
)
from talentmatch.domain.interfaces.resume_parser import ResumeParser
from talentmatch.domain.models.resume import (
    Resume,
    ResumeParsingOptions,
    ResumeParsingResult,
    calculate_confidence,
)
from talentmatch.infrastructure.ai.prompts import OPENAI_SYSTEM_PROMPT, build_openai_user_message

logger = logging.getLogger(__name__)


class OpenAIResumeParser(ResumeParser):
    """OpenAI implementation of the ResumeParser interface."""

    PROVIDER_NAME = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_MAX_TOKENS = 2000

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initializes the OpenAI client.

        Args:
            api_key: OpenAI API key. Reads from OPENAI_API_KEY env var if None.
            model: The default OpenAI model to use.
        """
        effective_api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not effective_api_key:
            raise ProviderConfigurationError(
                "OpenAI API key not provided and not found in environment variables.",
                provider=self.PROVIDER_NAME,
            )

        self.client = OpenAI(api_key=effective_api_key)
        self.model = model or self.DEFAULT_MODEL
        logger.info(f"OpenAIResumeParser initialized for model: {self.model}")

    def _build_messages(self, text: str, options: ResumeParsingOptions) -> List[dict]:
        return [
            {"role": "system", "content": OPENAI_SYSTEM_PROMPT},
            {"role": "user", "content": build_openai_user_message(text, options.language)},
        ]

    def parse_response(self, response: Any) -> Resume:
        """Extracts the resume from a chat completion response."""
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ResponseParsingError(f"Invalid response structure from OpenAI: {e}", provider=self.PROVIDER_NAME) from e
        if not content:
            raise ResponseParsingError("No content received from OpenAI", provider=self.PROVIDER_NAME)

        try:
            parsed = json.loads(content)
        except ValueError as e:
            logger.debug(f"Raw OpenAI content: {content[:500]!r}")
            raise ResponseParsingError(f"OpenAI returned invalid JSON: {e}", provider=self.PROVIDER_NAME) from e
        return Resume.from_dict(parsed)

    async def parse_resume(
        self, text: str, options: Optional[ResumeParsingOptions] = None
    ) -> ResumeParsingResult:
        """Parses resume text with the configured OpenAI model."""
        options = options or ResumeParsingOptions()
        model = options.model or self.model
        logger.debug(f"Sending resume ({len(text)} chars) to OpenAI model: {model}")
        start_time = time.perf_counter()
        try:
            # The SDK call is synchronous; run it off the event loop
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=model,
                messages=self._build_messages(text, options),
                temperature=options.temperature,
                max_tokens=options.max_tokens or self.DEFAULT_MAX_TOKENS,
                response_format={"type": "json_object"},
            )
        except RateLimitError as e:
            logger.warning(f"OpenAI Rate Limit Error encountered: {e}")
            raise ThrottlingError(str(e), provider=self.PROVIDER_NAME) from e
        except AuthenticationError as e:
            logger.error(f"OpenAI Authentication Error: {e}")
            raise ProviderError(f"OpenAI authentication error: {e}", provider=self.PROVIDER_NAME) from e
        except APIError as e:
            logger.error(f"OpenAI API Error encountered: {e}")
            raise ProviderError(f"OpenAI API error: {e}", provider=self.PROVIDER_NAME) from e

        resume = self.parse_response(response)
        processing_time_ms = (time.perf_counter() - start_time) * 1000
        confidence = calculate_confidence(resume, text) if options.include_confidence else None
        logger.info(f"OpenAI resume parsing completed in {processing_time_ms:.0f}ms")

        return ResumeParsingResult(
            success=True,
            provider=self.PROVIDER_NAME,
            processing_time_ms=processing_time_ms,
            data=resume,
            confidence=confidence,
            raw_response=response if options.include_raw_response else None,
        )
