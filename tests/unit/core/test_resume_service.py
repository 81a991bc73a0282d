import asyncio
import time

import pytest

from talentmatch.core.services.resume_service import ResumeParsingService
from talentmatch.domain.errors import ProviderError, ProviderFallbackError, ThrottlingError
from talentmatch.domain.events.api_events import ProviderCallCompleted
from talentmatch.domain.models.resume import ResumeParsingOptions
from talentmatch.infrastructure.resilience.provider_fallback import ProviderFallback
from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle

INTERVAL = 0.05


@pytest.fixture
def events():
    return []


@pytest.fixture
def service(primary_parser, secondary_parser, no_wait_throttle, fast_retry, events):
    fallback = ProviderFallback(retry=fast_retry, primary_name="aws-bedrock", secondary_name="openai")
    return ResumeParsingService(
        primary_parser=primary_parser,
        secondary_parser=secondary_parser,
        throttle=no_wait_throttle,
        fallback=fallback,
        event_handler=events.append,
    )


@pytest.mark.asyncio
async def test_parse_smart_uses_primary(service, primary_parser, secondary_parser, sample_text, events):
    result = await service.parse_smart(sample_text)

    assert result.provider == "aws-bedrock"
    assert result.fallback is False
    assert result.result.provider == "aws-bedrock"
    primary_parser.parse_resume.assert_awaited_once_with(sample_text, service.default_options)
    secondary_parser.parse_resume.assert_not_awaited()
    assert len(events) == 1
    assert isinstance(events[0], ProviderCallCompleted)
    assert events[0].provider == "aws-bedrock"


@pytest.mark.asyncio
async def test_parse_smart_falls_back_to_secondary(service, primary_parser, secondary_parser, sample_text):
    primary_parser.parse_resume.side_effect = ProviderError("ValidationException: model not enabled")

    result = await service.parse_smart(sample_text)

    assert result.provider == "openai"
    assert result.fallback is True
    assert result.fallback_reason == "ValidationException: model not enabled"
    assert result.result.provider == "openai"
    secondary_parser.parse_resume.assert_awaited_once()


@pytest.mark.asyncio
async def test_parse_smart_retries_throttled_primary(
    service, primary_parser, secondary_parser, sample_text, make_result
):
    primary_parser.parse_resume.side_effect = [
        ThrottlingError("Rate exceeded"),
        make_result("aws-bedrock", skills=["Go"]),
    ]

    result = await service.parse_smart(sample_text)

    assert result.provider == "aws-bedrock"
    assert result.result.data.skills == ["Go"]
    assert primary_parser.parse_resume.await_count == 2
    secondary_parser.parse_resume.assert_not_awaited()


@pytest.mark.asyncio
async def test_parse_smart_total_failure(service, primary_parser, secondary_parser, sample_text):
    primary_parser.parse_resume.side_effect = ProviderError("bedrock down")
    secondary_parser.parse_resume.side_effect = ProviderError("openai down")

    with pytest.raises(ProviderFallbackError) as exc_info:
        await service.parse_smart(sample_text)

    assert "aws-bedrock: bedrock down" in str(exc_info.value)
    assert "openai: openai down" in str(exc_info.value)


@pytest.mark.asyncio
async def test_parse_smart_without_secondary_reports_configuration(
    primary_parser, no_wait_throttle, fast_retry, sample_text
):
    primary_parser.parse_resume.side_effect = ProviderError("bedrock down")
    service = ResumeParsingService(
        primary_parser=primary_parser,
        secondary_parser=None,
        throttle=no_wait_throttle,
        fallback=ProviderFallback(retry=fast_retry),
    )

    with pytest.raises(ProviderFallbackError, match="No fallback provider configured"):
        await service.parse_smart(sample_text)
    assert service.provider_names == ["aws-bedrock"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n"])
async def test_empty_text_rejected(service, primary_parser, text):
    with pytest.raises(ValueError, match="Resume text is required"):
        await service.parse_smart(text)
    primary_parser.parse_resume.assert_not_awaited()


@pytest.mark.asyncio
async def test_parse_with_named_provider(service, primary_parser, secondary_parser, sample_text):
    options = ResumeParsingOptions(language="id")

    result = await service.parse_with("openai", sample_text, options)

    assert result.provider == "openai"
    secondary_parser.parse_resume.assert_awaited_once_with(sample_text, options)
    primary_parser.parse_resume.assert_not_awaited()


@pytest.mark.asyncio
async def test_parse_with_primary_does_not_fall_back(service, primary_parser, secondary_parser, sample_text):
    primary_parser.parse_resume.side_effect = ThrottlingError("Rate exceeded")

    with pytest.raises(ThrottlingError):
        await service.parse_with("aws-bedrock", sample_text)

    primary_parser.parse_resume.assert_awaited_once()
    secondary_parser.parse_resume.assert_not_awaited()


@pytest.mark.asyncio
async def test_parse_with_unknown_provider(service, sample_text):
    with pytest.raises(ValueError, match="Unknown provider 'groq'"):
        await service.parse_with("groq", sample_text)


@pytest.fixture
def paced_service(primary_parser, secondary_parser, fast_retry):
    """Service whose primary calls go through a throttle with a real interval."""
    return ResumeParsingService(
        primary_parser=primary_parser,
        secondary_parser=secondary_parser,
        throttle=RequestThrottle(min_interval_s=INTERVAL),
        fallback=ProviderFallback(retry=fast_retry, primary_name="aws-bedrock", secondary_name="openai"),
    )


def recording_parser(parser, starts, make_result, failures=0):
    """Makes parser.parse_resume record start times, failing with throttling `failures` times first."""
    async def parse_resume(text, options=None):
        starts.append(time.monotonic())
        if len(starts) <= failures:
            raise ThrottlingError("Rate exceeded")
        return make_result(parser.PROVIDER_NAME)
    parser.parse_resume.side_effect = parse_resume


@pytest.mark.asyncio
async def test_concurrent_primary_calls_are_spaced_by_throttle(
    paced_service, primary_parser, make_result, sample_text
):
    starts = []
    recording_parser(primary_parser, starts, make_result)

    results = await asyncio.gather(*(paced_service.parse_smart(sample_text) for _ in range(3)))

    assert [r.provider for r in results] == ["aws-bedrock"] * 3
    gaps = [later - earlier for earlier, later in zip(starts, starts[1:])]
    assert len(gaps) == 2
    assert all(gap >= INTERVAL - 0.005 for gap in gaps), gaps


@pytest.mark.asyncio
async def test_retried_primary_attempts_are_throttled(
    paced_service, primary_parser, make_result, sample_text
):
    starts = []
    recording_parser(primary_parser, starts, make_result, failures=1)

    result = await paced_service.parse_smart(sample_text)

    assert result.provider == "aws-bedrock"
    assert len(starts) == 2
    assert starts[1] - starts[0] >= INTERVAL - 0.005


@pytest.mark.asyncio
async def test_secondary_provider_is_not_throttled(
    paced_service, primary_parser, secondary_parser, make_result, sample_text
):
    paced_service.throttle = RequestThrottle(min_interval_s=1.0)
    primary_starts, secondary_starts = [], []
    recording_parser(primary_parser, primary_starts, make_result)
    recording_parser(secondary_parser, secondary_starts, make_result)

    await paced_service.parse_with("aws-bedrock", sample_text)
    await paced_service.parse_with("openai", sample_text)
    await paced_service.parse_with("openai", sample_text)

    assert len(secondary_starts) == 2
    assert secondary_starts[0] - primary_starts[0] < 0.5
    assert secondary_starts[1] - secondary_starts[0] < 0.5
