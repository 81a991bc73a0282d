import asyncio
import time

import pytest

from talentmatch.domain.events.api_events import RequestDeferred
from talentmatch.infrastructure.resilience.request_throttle import RequestThrottle

INTERVAL = 0.05
# asyncio timers may fire marginally early relative to time.monotonic()
TOLERANCE = 0.005


def recording_operation(starts, label, duration=0.0, error=None):
    """Builds an async operation that records its start time under `label`."""
    async def operation():
        starts.append((label, time.monotonic()))
        if duration:
            await asyncio.sleep(duration)
        if error is not None:
            raise error
        return label
    return operation


@pytest.mark.asyncio
async def test_consecutive_starts_are_spaced_by_min_interval():
    throttle = RequestThrottle(min_interval_s=INTERVAL)
    starts = []

    futures = [throttle.submit(recording_operation(starts, i)) for i in range(5)]
    results = await asyncio.gather(*futures)

    assert results == [0, 1, 2, 3, 4]
    gaps = [later[1] - earlier[1] for earlier, later in zip(starts, starts[1:])]
    assert all(gap >= INTERVAL - TOLERANCE for gap in gaps), gaps


@pytest.mark.asyncio
async def test_operations_start_in_submission_order_regardless_of_duration():
    throttle = RequestThrottle(min_interval_s=0.01)
    starts = []
    durations = [0.05, 0.0, 0.03, 0.0]

    futures = [throttle.submit(recording_operation(starts, i, d)) for i, d in enumerate(durations)]
    await asyncio.gather(*futures)

    assert [label for label, _ in starts] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_failing_operation_does_not_affect_later_operations():
    throttle = RequestThrottle(min_interval_s=0.0)
    starts = []
    boom = RuntimeError("operation 2 failed")

    futures = [
        throttle.submit(recording_operation(starts, i, error=boom if i == 2 else None))
        for i in range(1, 6)
    ]
    outcomes = await asyncio.gather(*futures, return_exceptions=True)

    assert outcomes[0] == 1
    assert outcomes[1] is boom
    assert outcomes[2:] == [3, 4, 5]
    assert [label for label, _ in starts] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_submit_passes_arguments_and_propagates_result():
    throttle = RequestThrottle(min_interval_s=0.0)

    async def add(a, b, scale=1):
        return (a + b) * scale

    assert await throttle.submit(add, 2, 3, scale=10) == 50


@pytest.mark.asyncio
async def test_first_operation_starts_without_waiting():
    events = []
    throttle = RequestThrottle(min_interval_s=5.0, event_handler=events.append)

    started = time.monotonic()
    await throttle.submit(recording_operation([], "only"))

    assert time.monotonic() - started < 1.0
    assert events == []


@pytest.mark.asyncio
async def test_deferred_requests_emit_events():
    events = []
    throttle = RequestThrottle(min_interval_s=INTERVAL, event_handler=events.append)
    starts = []

    await asyncio.gather(*(throttle.submit(recording_operation(starts, i)) for i in range(3)))

    deferred = [e for e in events if isinstance(e, RequestDeferred)]
    assert len(deferred) >= 2
    assert all(0 < e.wait_time_seconds <= INTERVAL for e in deferred)


@pytest.mark.asyncio
async def test_single_drain_loop_and_restart_after_idle():
    throttle = RequestThrottle(min_interval_s=0.0)
    starts = []

    first = throttle.submit(recording_operation(starts, "a", duration=0.01))
    second = throttle.submit(recording_operation(starts, "b"))
    assert throttle.is_draining
    assert throttle.pending == 2

    await asyncio.gather(first, second)
    await throttle.aclose()
    assert not throttle.is_draining
    assert throttle.pending == 0

    # A new submission after the queue emptied starts a fresh drain
    assert await throttle.submit(recording_operation(starts, "c")) == "c"
    assert [label for label, _ in starts] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_interval_applies_across_idle_periods():
    throttle = RequestThrottle(min_interval_s=INTERVAL)
    starts = []

    await throttle.submit(recording_operation(starts, 1))
    await throttle.submit(recording_operation(starts, 2))

    assert starts[1][1] - starts[0][1] >= INTERVAL - TOLERANCE


@pytest.mark.asyncio
async def test_context_manager_waits_for_queued_operations():
    starts = []
    async with RequestThrottle(min_interval_s=0.0) as throttle:
        futures = [throttle.submit(recording_operation(starts, i)) for i in range(3)]
    assert all(f.done() for f in futures)
    assert len(starts) == 3


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        RequestThrottle(min_interval_s=-1)
