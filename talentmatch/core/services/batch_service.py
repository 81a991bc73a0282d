"""Batch processing for multiple resumes.

Resumes are parsed in small concurrent batches with a pause between batches,
so a large upload does not flood the providers.
"""

import asyncio
import logging
from typing import List, Sequence

from talentmatch.core.services.resume_service import ResumeParsingService
from talentmatch.domain.errors import error_message
from talentmatch.domain.models.resume import BatchItemResult, ResumeDocument

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 3
DEFAULT_BATCH_DELAY_SECONDS = 5.0


class BatchResumeProcessor:
    """Parses documents batch by batch through the smart (fallback) parser."""

    def __init__(
        self,
        resume_service: ResumeParsingService,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay_between_batches_s: float = DEFAULT_BATCH_DELAY_SECONDS,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.resume_service = resume_service
        self.batch_size = batch_size
        self.delay_between_batches_s = delay_between_batches_s

    async def _process_one(self, document: ResumeDocument) -> BatchItemResult:
        try:
            result = await self.resume_service.parse_smart(document.text)
        except Exception as e:
            logger.error(f"Failed to parse resume '{document.id}': {e}")
            return BatchItemResult(id=document.id, success=False, error=error_message(e))
        return BatchItemResult(id=document.id, success=True, result=result)

    async def process_batch(self, documents: Sequence[ResumeDocument]) -> List[BatchItemResult]:
        """Parses all documents, returning one result per document in input order."""
        results: List[BatchItemResult] = []
        total_batches = (len(documents) + self.batch_size - 1) // self.batch_size

        for index in range(0, len(documents), self.batch_size):
            batch = documents[index:index + self.batch_size]
            logger.info(f"Processing batch {index // self.batch_size + 1} of {total_batches}")
            results.extend(await asyncio.gather(*(self._process_one(doc) for doc in batch)))

            if index + self.batch_size < len(documents):
                logger.info(f"Waiting {self.delay_between_batches_s}s before next batch...")
                await asyncio.sleep(self.delay_between_batches_s)

        return results
