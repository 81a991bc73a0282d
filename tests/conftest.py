import pytest
from unittest.mock import MagicMock

from talentmatch.domain.interfaces.resume_parser import ResumeParser
from talentmatch.domain.models.resume import Resume, ResumeParsingResult
from talentmatch.infrastructure.config import settings
from talentmatch.infrastructure.resilience.api_retry import RetryWithBackoff
from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle

SAMPLE_RESUME_TEXT = (
    "Jane Doe - Senior Software Engineer, Berlin. 8 years building web platforms "
    "with Python, Django, PostgreSQL and AWS. MSc Computer Science, TU Berlin. "
    "Led a team of 5 engineers; strong communication and leadership skills."
)


def make_parsing_result(provider: str, skills=None) -> ResumeParsingResult:
    """Builds a successful parsing result as a provider adapter would."""
    return ResumeParsingResult(
        success=True,
        provider=provider,
        processing_time_ms=12.5,
        data=Resume(
            skills=list(skills or ["Python", "Django", "Leadership"]),
            experience="8 years building web platforms",
            education="MSc Computer Science",
            summary="Senior engineer focused on web platforms",
            years_of_experience=8,
            current_role="Senior Software Engineer",
            location="Berlin",
        ),
        confidence=0.9,
    )


def _mock_parser(provider_name: str) -> MagicMock:
    parser = MagicMock(spec=ResumeParser)
    parser.PROVIDER_NAME = provider_name
    parser.parse_resume.return_value = make_parsing_result(provider_name)
    return parser


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_RESUME_TEXT


@pytest.fixture
def primary_parser() -> MagicMock:
    """Mock primary (Bedrock-like) parser whose parse_resume is an AsyncMock."""
    return _mock_parser("aws-bedrock")


@pytest.fixture
def secondary_parser() -> MagicMock:
    """Mock secondary (OpenAI-like) parser whose parse_resume is an AsyncMock."""
    return _mock_parser("openai")


@pytest.fixture
def fast_retry() -> RetryWithBackoff:
    """Retry policy without real waiting."""
    return RetryWithBackoff(max_retries=3, base_delay_s=0.0, max_jitter_s=0.0)


@pytest.fixture
def no_wait_throttle() -> RequestThrottle:
    return RequestThrottle(min_interval_s=0.0)


@pytest.fixture(autouse=True)
def isolated_config():
    """Keeps configuration state from leaking between tests."""
    settings.clear_test_config()
    settings.reset_configuration()
    yield
    settings.clear_test_config()
    settings.reset_configuration()


@pytest.fixture
def make_result():
    """Factory for successful parsing results, see make_parsing_result."""
    return make_parsing_result
