from unittest.mock import AsyncMock

import pytest

from megaverse.domain.exceptions import MaxRetryError, MegaverseApiError, RateLimitedError
from megaverse.domain.models.common import RetryPolicy
from megaverse.infrastructure.resilience.api_retry import ApiRetryService


@pytest.fixture
def retry_service(recording_sleep):
    return ApiRetryService(policy=RetryPolicy(), sleep=recording_sleep)


def rate_limited():
    return RateLimitedError("Too Many Requests. Try again later.", status_code=429)


def test_default_policy_delays():
    policy = RetryPolicy()
    assert [policy.delay_for(i) for i in range(3)] == [0.5, 1.0, 2.0]


@pytest.mark.asyncio
async def test_succeeds_after_two_rate_limited_attempts(retry_service, recording_sleep):
    func = AsyncMock(side_effect=[rate_limited(), rate_limited(), "created"])

    result = await retry_service.execute_with_retry(func, "POST", "polyanets", endpoint_name="POST /polyanets")

    assert result == "created"
    assert func.await_count == 3
    func.assert_awaited_with("POST", "polyanets")
    assert recording_sleep.delays == [0.5, 1.0]
    assert sum(recording_sleep.delays) == pytest.approx(1.5)


@pytest.mark.asyncio
async def test_non_rate_limit_error_is_not_retried(retry_service, recording_sleep):
    error = MegaverseApiError("HTTP 500", status_code=500, body="boom")
    func = AsyncMock(side_effect=error)

    with pytest.raises(MegaverseApiError) as excinfo:
        await retry_service.execute_with_retry(func)

    assert excinfo.value is error
    func.assert_awaited_once()
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_unexpected_exception_propagates_immediately(retry_service, recording_sleep):
    func = AsyncMock(side_effect=ValueError("bad payload"))

    with pytest.raises(ValueError, match="bad payload"):
        await retry_service.execute_with_retry(func)

    func.assert_awaited_once()
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_exhausted_attempts_raise_max_retry_error(retry_service, recording_sleep):
    func = AsyncMock(side_effect=[rate_limited(), rate_limited(), rate_limited()])

    with pytest.raises(MaxRetryError) as excinfo:
        await retry_service.execute_with_retry(func)

    assert func.await_count == 3
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.original_exception, RateLimitedError)
    # No wait after the final attempt
    assert recording_sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_single_attempt_policy_never_sleeps(recording_sleep):
    service = ApiRetryService(policy=RetryPolicy(max_attempts=1), sleep=recording_sleep)
    func = AsyncMock(side_effect=rate_limited())

    with pytest.raises(MaxRetryError):
        await service.execute_with_retry(func)

    assert recording_sleep.delays == []


def test_invalid_retry_policy():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
