"""Tests for the bounded retry primitive"""
import asyncio

import pytest

from publisher.retry import RetryExhausted, RetryPolicy, TransientError, run_with_retry


@pytest.mark.unit
class TestRetryPolicy:
    """Test suite for backoff schedule"""

    def test_default_schedule(self):
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.delay_after(1) == 1.0
        assert policy.delay_after(2) == 2.0
        assert policy.delay_after(3) is None

    def test_retryable_statuses(self):
        policy = RetryPolicy()

        for status_code in (500, 502, 503, 504):
            assert policy.is_retryable_status(status_code)
        for status_code in (400, 401, 403, 429, 501):
            assert not policy.is_retryable_status(status_code)

    @pytest.mark.parametrize("kwargs", [
        {"max_attempts": 0},
        {"initial_delay": -1.0},
        {"multiplier": 0.5},
    ])
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


@pytest.mark.unit
class TestRunWithRetry:
    """Test suite for run_with_retry"""

    @pytest.mark.asyncio
    async def test_success_first_try(self, recording_sleep):
        async def operation(attempt_number):
            return "ok"

        assert await run_with_retry(operation, sleep=recording_sleep) == "ok"
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_transient_then_success(self, recording_sleep):
        attempts = []

        async def operation(attempt_number):
            attempts.append(attempt_number)
            if attempt_number < 3:
                raise TransientError("HTTP 503", 503)
            return "ok"

        assert await run_with_retry(operation, sleep=recording_sleep) == "ok"
        assert attempts == [1, 2, 3]
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhaustion(self, recording_sleep):
        recorded = []

        async def operation(attempt_number):
            raise TransientError("HTTP 500", 500)

        with pytest.raises(RetryExhausted) as exc_info:
            await run_with_retry(operation, sleep=recording_sleep, on_attempt=recorded.append)

        assert len(exc_info.value.attempts) == 3
        assert exc_info.value.last_error.status_code == 500
        assert [attempt.delay_before_next_attempt for attempt in recorded] == [1.0, 2.0, None]
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_terminal_error_is_not_retried(self, recording_sleep):
        calls = []

        async def operation(attempt_number):
            calls.append(attempt_number)
            raise PermissionError("no")

        with pytest.raises(PermissionError):
            await run_with_retry(operation, sleep=recording_sleep)

        assert calls == [1]
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_cancellation_during_backoff(self):
        calls = []

        async def operation(attempt_number):
            calls.append(attempt_number)
            raise TransientError("HTTP 503", 503)

        policy = RetryPolicy(initial_delay=60.0)
        task = asyncio.create_task(run_with_retry(operation, policy=policy))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert calls == [1]
