"""Concrete implementation of the ResumeParser interface using AWS Bedrock.

Hides the specifics of the boto3 bedrock-runtime client and translates
requests/responses between the domain model and the Bedrock invoke_model
format. Throttling errors are translated to `ThrottlingError` so the
resilience layer can retry them.
"""

import asyncio
import json
import logging
import os
import time
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from talentmatch.domain.errors import ProviderError, ResponseParsingError, ThrottlingError
from talentmatch.domain.interfaces.resume_parser import ResumeParser
from talentmatch.domain.models.resume import (
    Resume,
    ResumeParsingOptions,
    ResumeParsingResult,
    calculate_confidence,
)
from talentmatch.infrastructure.ai.prompts import build_resume_prompt

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = frozenset({"ThrottlingException", "TooManyRequestsException"})
ANTHROPIC_VERSION = "bedrock-2023-05-31"


def uses_messages_api(model_id: str) -> bool:
    """Claude 3.5 models only accept the Messages API body."""
    return "claude-3-5" in model_id or "claude-3.5" in model_id


class BedrockResumeParser(ResumeParser):
    """AWS Bedrock implementation of the ResumeParser interface."""

    PROVIDER_NAME = "aws-bedrock"
    DEFAULT_REGION = "us-east-1"
    DEFAULT_MODEL = "anthropic.claude-3-5-sonnet-20240620-v1:0"
    DEFAULT_MAX_TOKENS = 1000

    def __init__(self, region: Optional[str] = None, model_id: Optional[str] = None, client: Any = None):
        """Initializes the Bedrock runtime client.

        Args:
            region: AWS region. Reads AWS_REGION env var if None.
            model_id: Bedrock model id. Reads AWS_BEDROCK_MODEL_ID env var if None.
            client: Pre-built bedrock-runtime client (mainly for tests).
        """
        self.region = region or os.getenv("AWS_REGION") or self.DEFAULT_REGION
        self.model_id = model_id or os.getenv("AWS_BEDROCK_MODEL_ID") or self.DEFAULT_MODEL
        if client is None:
            # SDK-level retries are disabled; RetryWithBackoff owns retry policy
            client = boto3.client(
                service_name="bedrock-runtime",
                region_name=self.region,
                config=Config(retries={"max_attempts": 1, "mode": "standard"}, connect_timeout=10, read_timeout=60),
            )
        self.client = client
        logger.info(f"BedrockResumeParser initialized for model {self.model_id} in {self.region}")

    def build_request_body(self, prompt: str, options: ResumeParsingOptions) -> Dict[str, Any]:
        """Builds the invoke_model body for the configured model family."""
        model_id = options.model or self.model_id
        max_tokens = options.max_tokens or self.DEFAULT_MAX_TOKENS
        if uses_messages_api(model_id):
            return {
                "anthropic_version": ANTHROPIC_VERSION,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": options.temperature,
            }
        return {
            "prompt": prompt,
            "max_tokens_to_sample": max_tokens,
            "temperature": options.temperature,
        }

    @staticmethod
    def _extract_content(body: Dict[str, Any]) -> str:
        content = body.get("content")
        if isinstance(content, list):
            # Messages API format
            first = content[0] if content else {}
            return first.get("text", "") if isinstance(first, dict) else ""
        return body.get("completion") or (content if isinstance(content, str) else "")

    def parse_response(self, raw_body: str) -> Resume:
        """Extracts the resume from a Bedrock response body.

        An unreadable response envelope raises ResponseParsingError. Model
        output that is not valid JSON yields an empty Resume.
        """
        try:
            body = json.loads(raw_body)
        except (TypeError, ValueError) as e:
            raise ResponseParsingError(f"Invalid response body from Bedrock: {e}", provider=self.PROVIDER_NAME) from e

        content = self._extract_content(body if isinstance(body, dict) else {})
        try:
            parsed = json.loads(content)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to parse Bedrock model output as JSON: {e}")
            logger.debug(f"Raw Bedrock content: {content[:500]!r}")
            return Resume()
        return Resume.from_dict(parsed)

    def _invoke(self, body: Dict[str, Any], model_id: str) -> str:
        response = self.client.invoke_model(
            modelId=model_id,
            body=json.dumps(body),
            contentType="application/json",
            accept="application/json",
        )
        raw = response["body"]
        raw = raw.read() if hasattr(raw, "read") else raw
        return raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw

    async def parse_resume(
        self, text: str, options: Optional[ResumeParsingOptions] = None
    ) -> ResumeParsingResult:
        """Parses resume text with the configured Bedrock model."""
        options = options or ResumeParsingOptions()
        model_id = options.model or self.model_id
        logger.info(f"Starting resume parsing with Bedrock ({len(text)} chars, model {model_id})")
        start_time = time.perf_counter()

        body = self.build_request_body(build_resume_prompt(text, options.language), options)
        try:
            raw_body = await asyncio.to_thread(self._invoke, body, model_id)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            message = e.response.get("Error", {}).get("Message") or str(e)
            if code in THROTTLING_ERROR_CODES:
                logger.warning(f"Bedrock throttled the request: {message}")
                raise ThrottlingError(message, provider=self.PROVIDER_NAME) from e
            logger.error(f"Bedrock request failed ({code}): {message}")
            raise ProviderError(f"{code}: {message}" if code else message, provider=self.PROVIDER_NAME) from e
        except BotoCoreError as e:
            logger.error(f"Bedrock client error: {e}")
            raise ProviderError(str(e), provider=self.PROVIDER_NAME) from e

        resume = self.parse_response(raw_body)
        processing_time_ms = (time.perf_counter() - start_time) * 1000
        confidence = calculate_confidence(resume, text) if options.include_confidence else None
        logger.info(
            f"Resume parsing completed in {processing_time_ms:.0f}ms "
            f"(confidence {confidence}, {len(resume.skills)} skills)"
        )

        return ResumeParsingResult(
            success=True,
            provider=self.PROVIDER_NAME,
            processing_time_ms=processing_time_ms,
            data=resume,
            confidence=confidence,
            raw_response=raw_body if options.include_raw_response else None,
        )
