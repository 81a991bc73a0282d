"""Interface for AI-backed resume parsers.

Defines the contract for sending resume text to different AI providers
(e.g., AWS Bedrock, OpenAI) and receiving structured resume data.
"""

import abc
import asyncio
import logging
from typing import List, Optional, Sequence

from talentmatch.domain.errors import error_message
from talentmatch.domain.models.common import ResumeText
from talentmatch.domain.models.resume import ResumeParsingOptions, ResumeParsingResult

logger = logging.getLogger(__name__)


class ResumeParser(abc.ABC):
    """Abstract Base Class for resume parsing providers."""

    PROVIDER_NAME: str = "unknown"

    @abc.abstractmethod
    async def parse_resume(
        self, text: ResumeText, options: Optional[ResumeParsingOptions] = None
    ) -> ResumeParsingResult:
        """Parses resume text into structured data asynchronously.

        Args:
            text: Plain text of the resume.
            options: Parsing options (language, temperature, token limit...).

        Returns:
            A successful ResumeParsingResult.

        Raises:
            ThrottlingError: If the provider is rate limiting this client.
            ProviderError: For any other provider failure.
        """
        pass

    async def parse_resumes_batch(
        self, texts: Sequence[ResumeText], options: Optional[ResumeParsingOptions] = None
    ) -> List[ResumeParsingResult]:
        """Parses several resumes concurrently.

        Failures never abort the batch; they are reported as unsuccessful
        results in the same position as their input.
        """
        logger.info(f"Starting batch resume parsing with {self.PROVIDER_NAME}: {len(texts)} resumes")
        outcomes = await asyncio.gather(
            *(self.parse_resume(text, options) for text in texts),
            return_exceptions=True,
        )

        results: List[ResumeParsingResult] = []
        for outcome in outcomes:
            if isinstance(outcome, ResumeParsingResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                results.append(ResumeParsingResult(
                    success=False,
                    provider=self.PROVIDER_NAME,
                    processing_time_ms=0.0,
                    error=error_message(outcome),
                ))
            else:
                raise outcome
        return results
