"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates the
work to the application services (ResumeParsingService, BatchResumeProcessor,
cost estimation). Errors are reported through the UserInterface instead of
propagating to the CLI.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from talentmatch.core.services.batch_service import BatchResumeProcessor
from talentmatch.core.services.resume_service import ResumeParsingService
from talentmatch.core.services.skill_catalog import categorize_skills
from talentmatch.domain.interfaces.user_interface import UserInterface
from talentmatch.domain.models.common import AnnotatedResult, ResumeText
from talentmatch.domain.models.resume import ResumeDocument, ResumeParsingOptions
from talentmatch.infrastructure.optimization.token_estimator import TokenEstimator, estimate_parsing_cost

logger = logging.getLogger(__name__)

SMART_PROVIDER = "smart"


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        resume_service: ResumeParsingService,
        batch_processor: BatchResumeProcessor,
        token_estimator: TokenEstimator,
        ui: UserInterface,
    ):
        self.resume_service = resume_service
        self.batch_processor = batch_processor
        self.token_estimator = token_estimator
        self.ui = ui

    def _read_text(self, file_path: Path) -> Optional[ResumeText]:
        try:
            return ResumeText(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {file_path}: {e}")
            self.ui.display_error(f"Could not read '{file_path}': {e}")
            return None

    async def handle_parse(
        self,
        file_path: Path,
        provider: str = SMART_PROVIDER,
        language: str = "en",
        as_json: bool = False,
    ) -> bool:
        """Handles the 'parse' command. Returns True on success."""
        logger.info(f"Handling 'parse' command for {file_path} with provider: {provider}")
        text = self._read_text(file_path)
        if text is None:
            return False

        options = ResumeParsingOptions(language=language)
        try:
            if provider == SMART_PROVIDER:
                result = await self.resume_service.parse_smart(text, options)
            else:
                parsed = await self.resume_service.parse_with(provider, text, options)
                result = AnnotatedResult(result=parsed, provider=parsed.provider, fallback=False)
        except Exception as e:
            logger.error(f"Parse command failed: {e}", exc_info=True)
            self.ui.display_error(f"Failed to parse resume: {e}")
            return False

        skills = result.result.data.skills if result.result.data else []
        categories = categorize_skills(skills)
        if as_json:
            payload = result.as_dict()
            payload["skill_categories"] = categories
            self.ui.display_output(json.dumps(payload, indent=2, default=str))
        else:
            self.ui.display_parse_result(result, categories)
        return True

    async def handle_batch(self, directory: Path, pattern: str = "*.txt") -> bool:
        """Handles the 'batch' command over every matching file in a directory."""
        files: List[Path] = sorted(p for p in directory.glob(pattern) if p.is_file())
        if not files:
            self.ui.display_warning(f"No files matching '{pattern}' in {directory}")
            return False

        documents = []
        for path in files:
            text = self._read_text(path)
            if text is not None:
                documents.append(ResumeDocument(id=path.name, text=text))

        self.ui.display_info(f"Parsing {len(documents)} resumes in batches of {self.batch_processor.batch_size}...")
        results = await self.batch_processor.process_batch(documents)
        self.ui.display_batch_summary(results)
        return all(item.success for item in results)

    def handle_estimate_cost(self, file_path: Path) -> bool:
        """Handles the 'estimate-cost' command."""
        text = self._read_text(file_path)
        if text is None:
            return False
        estimate = estimate_parsing_cost(text, estimator=self.token_estimator)
        self.ui.display_info(
            f"Estimated OpenAI parsing cost for '{file_path.name}': ${estimate.total:.6f} "
            f"({estimate.input_tokens} input tokens, input ${estimate.input_cost:.6f}, "
            f"output ${estimate.output_cost:.6f})"
        )
        return True
