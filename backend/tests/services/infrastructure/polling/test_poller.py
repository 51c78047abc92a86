"""
Tests for roastcast.services.infrastructure.polling.poller
"""

import httpx
import pytest
from unittest.mock import AsyncMock

from roastcast.config import PollingSettings
from roastcast.core.exceptions import MediaJobFailedError, MediaJobTimeoutError
from roastcast.services.infrastructure.polling import (
    BackoffPoller,
    PollOutcome,
    PollState,
    backoff_delay,
    normalize_poll_response,
)


class TestBackoffDelay:
    """Test the delay schedule."""

    def test_schedule_without_jitter(self):
        delays = [backoff_delay(attempt, base=1000, cap=30000, multiplier=2) for attempt in range(7)]
        assert delays == [1000, 2000, 4000, 8000, 16000, 30000, 30000]

    def test_jitter_adds_at_most_ratio(self):
        assert backoff_delay(0, base=10, cap=100, jitter_ratio=0.2, rng=lambda: 1.0) == pytest.approx(12)
        assert backoff_delay(0, base=10, cap=100, jitter_ratio=0.2, rng=lambda: 0.0) == 10

    def test_jitter_applies_after_cap(self):
        assert backoff_delay(10, base=2, cap=30, jitter_ratio=0.2, rng=lambda: 0.5) == pytest.approx(33)

    def test_negative_attempt_rejected(self):
        with pytest.raises(ValueError):
            backoff_delay(-1, base=1, cap=2)


class TestNormalizePollResponse:
    """Test folding of the different status payload shapes."""

    def test_nested_video_url(self):
        outcome = normalize_poll_response(200, {"video": {"url": "https://v/1.mp4", "duration": 6}})
        assert outcome.state is PollState.COMPLETED
        assert outcome.url == "https://v/1.mp4"
        assert outcome.duration == 6

    @pytest.mark.parametrize("duration", ["5", None, True, -1, 0, {"seconds": 5}])
    def test_unusable_duration_is_dropped(self, duration):
        outcome = normalize_poll_response(200, {"url": "https://v/1.mp4", "duration": duration})
        assert outcome.state is PollState.COMPLETED
        assert outcome.duration is None

    def test_float_duration_kept(self):
        outcome = normalize_poll_response(200, {"status": "completed", "output": {"url": "u", "duration": 5.5}})
        assert outcome.duration == 5.5

    def test_flat_url(self):
        outcome = normalize_poll_response(200, {"url": "https://v/2.mp4"})
        assert outcome.state is PollState.COMPLETED
        assert outcome.url == "https://v/2.mp4"

    def test_status_completed_with_output(self):
        outcome = normalize_poll_response(200, {"status": "completed", "output": {"url": "https://v/3.mp4"}})
        assert outcome.state is PollState.COMPLETED
        assert outcome.url == "https://v/3.mp4"

    def test_nested_video_has_priority(self):
        payload = {
            "video": {"url": "https://nested"},
            "url": "https://flat",
            "status": "completed",
            "output": {"url": "https://output"},
        }
        assert normalize_poll_response(200, payload).url == "https://nested"

    def test_flat_url_beats_output(self):
        payload = {"url": "https://flat", "status": "completed", "output": {"url": "https://output"}}
        assert normalize_poll_response(200, payload).url == "https://flat"

    def test_explicit_failure(self):
        outcome = normalize_poll_response(200, {"status": "failed", "error": "policy violation"})
        assert outcome.state is PollState.FAILED
        assert outcome.error == "policy violation"

    def test_error_field_alone_is_failure(self):
        outcome = normalize_poll_response(200, {"error": {"message": "bad prompt"}})
        assert outcome.state is PollState.FAILED
        assert outcome.error == "bad prompt"

    def test_failure_without_reason(self):
        assert normalize_poll_response(200, {"status": "failed"}).error == "unknown"

    def test_rate_limited(self):
        outcome = normalize_poll_response(429, None)
        assert outcome.state is PollState.RATE_LIMITED
        assert outcome.state.is_retryable

    def test_server_error_is_transient(self):
        outcome = normalize_poll_response(503, None)
        assert outcome.state is PollState.TRANSIENT
        assert outcome.error == "HTTP 503"

    def test_pending_with_progress(self):
        outcome = normalize_poll_response(200, {"status": "processing", "progress": 0.4})
        assert outcome.state is PollState.PENDING
        assert outcome.progress == pytest.approx(0.4)

    def test_completed_without_url_is_pending(self):
        assert normalize_poll_response(200, {"status": "completed"}).state is PollState.PENDING

    def test_failed_is_not_retryable(self):
        assert not PollState.FAILED.is_retryable


def _poller(no_sleep, **kwargs):
    defaults = dict(base_delay=2.0, max_delay=30.0, jitter_ratio=0.0, max_attempts=5, sleep=no_sleep)
    defaults.update(kwargs)
    return BackoffPoller(**defaults)


class TestBackoffPoller:
    """Test the polling loop."""

    @pytest.mark.asyncio
    async def test_returns_on_completion(self, no_sleep):
        fetch = AsyncMock(side_effect=[
            PollOutcome(state=PollState.PENDING),
            PollOutcome(state=PollState.COMPLETED, url="https://v/done.mp4"),
        ])
        outcome = await _poller(no_sleep).poll("job-1", fetch)

        assert outcome.url == "https://v/done.mp4"
        assert fetch.await_count == 2
        fetch.assert_awaited_with("job-1")

    @pytest.mark.asyncio
    async def test_sleeps_before_every_check(self, no_sleep):
        fetch = AsyncMock(side_effect=[
            PollOutcome(state=PollState.PENDING),
            PollOutcome(state=PollState.PENDING),
            PollOutcome(state=PollState.COMPLETED, url="u"),
        ])
        await _poller(no_sleep).poll("job", fetch)
        assert no_sleep.delays == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_failure_raises_immediately(self, no_sleep):
        fetch = AsyncMock(return_value=PollOutcome(state=PollState.FAILED, error="policy violation"))

        with pytest.raises(MediaJobFailedError, match="policy violation") as exc_info:
            await _poller(no_sleep, max_attempts=60).poll("job-f", fetch)

        assert fetch.await_count == 1
        assert exc_info.value.job_id == "job-f"

    @pytest.mark.asyncio
    async def test_failure_from_real_payload(self, no_sleep):
        async def fetch(job_id):
            return normalize_poll_response(200, {"status": "failed", "error": "policy violation"})

        with pytest.raises(MediaJobFailedError, match="Video generation failed: policy violation"):
            await _poller(no_sleep, max_attempts=60).poll("job", fetch)
        assert len(no_sleep.delays) == 1

    @pytest.mark.asyncio
    async def test_timeout_after_budget(self, no_sleep):
        fetch = AsyncMock(return_value=PollOutcome(state=PollState.PENDING))

        with pytest.raises(MediaJobTimeoutError) as exc_info:
            await _poller(no_sleep, max_attempts=4).poll("job-t", fetch)

        assert fetch.await_count == 4
        assert exc_info.value.attempts == 4

    @pytest.mark.asyncio
    async def test_rate_limit_continues_with_extra_delay(self, no_sleep):
        fetch = AsyncMock(side_effect=[
            PollOutcome(state=PollState.RATE_LIMITED),
            PollOutcome(state=PollState.COMPLETED, url="u"),
        ])
        outcome = await _poller(no_sleep).poll("job", fetch)

        assert outcome.state is PollState.COMPLETED
        assert no_sleep.delays == [2.0, 4.0 + 2.0]

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self, no_sleep):
        fetch = AsyncMock(side_effect=[
            httpx.ConnectError("connection reset"),
            ValueError("Expecting value"),
            PollOutcome(state=PollState.TRANSIENT, error="HTTP 502"),
            PollOutcome(state=PollState.COMPLETED, url="u"),
        ])
        outcome = await _poller(no_sleep).poll("job", fetch)

        assert outcome.url == "u"
        assert fetch.await_count == 4

    @pytest.mark.asyncio
    async def test_delays_are_capped(self, no_sleep):
        fetch = AsyncMock(return_value=PollOutcome(state=PollState.PENDING))
        with pytest.raises(MediaJobTimeoutError):
            await _poller(no_sleep, max_attempts=7).poll("job", fetch)
        assert no_sleep.delays == [2.0, 4.0, 8.0, 16.0, 30.0, 30.0, 30.0]

    def test_from_settings(self, no_sleep):
        settings = PollingSettings(base_delay=1.0, max_delay=5.0, multiplier=3.0, jitter_ratio=0.1, max_attempts=9)
        poller = BackoffPoller.from_settings(settings, sleep=no_sleep)
        assert poller.base_delay == 1.0
        assert poller.max_delay == 5.0
        assert poller.multiplier == 3.0
        assert poller.max_attempts == 9

    def test_invalid_attempt_budget(self):
        with pytest.raises(ValueError):
            BackoffPoller(max_attempts=0)
