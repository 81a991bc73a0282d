"""Main entry point for the talentmatch application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Coroutine, Dict, Optional

import typer
from typing_extensions import Annotated
from botocore.exceptions import BotoCoreError

# --- Core Layer ---
from talentmatch.core.command_handler import SMART_PROVIDER, CommandHandler
from talentmatch.core.services.batch_service import BatchResumeProcessor
from talentmatch.core.services.resume_service import ResumeParsingService
from talentmatch.domain.errors import ProviderError

# --- Infrastructure Layer ---
from talentmatch.infrastructure.ai.bedrock.bedrock_parser import BedrockResumeParser
from talentmatch.infrastructure.ai.openai.openai_parser import OpenAIResumeParser
from talentmatch.infrastructure.cli.display import ConsoleDisplay
from talentmatch.infrastructure.config.settings import (
    get_aws_region,
    get_backoff_policy,
    get_batch_delay,
    get_batch_size,
    get_bedrock_model_id,
    get_config,
    get_log_level,
    get_openai_api_key,
    get_openai_model,
    get_throttle_interval,
    load_configuration,
)
from talentmatch.infrastructure.monitoring.event_logger import log_event
from talentmatch.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging
from talentmatch.infrastructure.optimization.token_estimator import TokenEstimator
from talentmatch.infrastructure.resilience.api_retry import RetryWithBackoff
from talentmatch.infrastructure.resilience.provider_fallback import ProviderFallback
from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def create_dependencies(log_level: Optional[str] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    # 1. Configuration and logging
    load_configuration()
    level_name = (log_level or get_log_level()).upper()
    setup_logging(
        log_level=getattr(logging, level_name, logging.INFO),
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
        json_format=bool(get_config('logging.json', False)),
    )
    logger.info("Initializing application dependencies...")

    dependencies: Dict[str, Any] = {'ui': ConsoleDisplay()}

    # 2. Provider adapters. Bedrock is primary, OpenAI is the fallback tier.
    dependencies['primary_parser'] = BedrockResumeParser(
        region=get_aws_region(),
        model_id=get_bedrock_model_id(),
    )
    openai_api_key = get_openai_api_key()
    if openai_api_key:
        dependencies['secondary_parser'] = OpenAIResumeParser(api_key=openai_api_key, model=get_openai_model())
    else:
        logger.warning("OpenAI API key not found, fallback provider disabled.")
        dependencies['secondary_parser'] = None

    # 3. Resilience services
    dependencies['throttle'] = RequestThrottle(min_interval_s=get_throttle_interval(), event_handler=log_event)
    retry = RetryWithBackoff.from_policy(get_backoff_policy(), event_handler=log_event)
    dependencies['fallback'] = ProviderFallback(
        retry=retry,
        primary_name=BedrockResumeParser.PROVIDER_NAME,
        secondary_name=OpenAIResumeParser.PROVIDER_NAME,
        event_handler=log_event,
    )

    # 4. Core services
    dependencies['resume_service'] = ResumeParsingService(
        primary_parser=dependencies['primary_parser'],
        secondary_parser=dependencies['secondary_parser'],
        throttle=dependencies['throttle'],
        fallback=dependencies['fallback'],
        event_handler=log_event,
    )
    dependencies['batch_processor'] = BatchResumeProcessor(
        dependencies['resume_service'],
        batch_size=get_batch_size(),
        delay_between_batches_s=get_batch_delay(),
    )
    dependencies['command_handler'] = CommandHandler(
        resume_service=dependencies['resume_service'],
        batch_processor=dependencies['batch_processor'],
        token_estimator=TokenEstimator(),
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


_dependencies: Optional[Dict[str, Any]] = None
_log_level_override: Optional[str] = None


def get_dependencies() -> Dict[str, Any]:
    """Returns the wired dependencies, creating them on first use."""
    global _dependencies
    if _dependencies is None:
        try:
            _dependencies = create_dependencies(log_level=_log_level_override)
        except (ProviderError, BotoCoreError) as e:
            logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
            ConsoleDisplay().display_error(f"Application Initialization Failed: {e}")
            raise typer.Exit(code=1)
    return _dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="talentmatch",
    help="talentmatch: resume parsing with AWS Bedrock, OpenAI fallback, throttling and retries.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, bool]) -> None:
    """Runs an async command handler and maps its outcome to the exit code."""
    if not asyncio.run(coro):
        raise typer.Exit(code=1)


def _handler() -> CommandHandler:
    return get_dependencies()['command_handler']


ExistingFile = Annotated[
    Path,
    typer.Argument(exists=True, file_okay=True, dir_okay=False, readable=True, resolve_path=True,
                   help="Plain-text resume file."),
]


@app.command()
def parse(
    file: ExistingFile,
    provider: Annotated[str, typer.Option("--provider", "-p", help="'smart' (Bedrock with OpenAI fallback), 'aws-bedrock' or 'openai'.")] = SMART_PROVIDER,
    language: Annotated[str, typer.Option("--language", "-l", help="Language of the resume.")] = "en",
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
):
    """Parse a resume into structured data."""
    run_async(_handler().handle_parse(file, provider=provider, language=language, as_json=as_json))


@app.command()
def batch(
    directory: Annotated[Path, typer.Argument(exists=True, file_okay=False, dir_okay=True, resolve_path=True,
                                              help="Directory containing plain-text resumes.")],
    pattern: Annotated[str, typer.Option("--pattern", help="Glob pattern for resume files.")] = "*.txt",
    batch_size: Annotated[Optional[int], typer.Option("--batch-size", min=1, help="Resumes parsed concurrently per batch.")] = None,
):
    """Parse every resume in a directory, batch by batch."""
    handler = _handler()
    if batch_size is not None:
        handler.batch_processor.batch_size = batch_size
    run_async(handler.handle_batch(directory, pattern=pattern))


@app.command(name="estimate-cost")
def estimate_cost(file: ExistingFile):
    """Estimate the OpenAI cost of parsing a resume."""
    if not _handler().handle_estimate_cost(file):
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Override the configured log level (DEBUG, INFO...).")] = None,
):
    """Resume parsing with throttling, retries and provider fallback."""
    global _log_level_override
    _log_level_override = log_level


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
