"""
Backoff Poller

Waits on asynchronous media jobs by repeatedly checking their status with an
exponentially growing, jittered delay between checks.

Poll responses come in several shapes depending on the upstream API version;
``normalize_poll_response`` folds them into a single ``PollOutcome``.
"""

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from roastcast.core.exceptions import MediaJobFailedError, MediaJobTimeoutError
from roastcast.core.logging import get_logger

logger = get_logger(__name__, component="poller")


def backoff_delay(
    attempt: int,
    base: float,
    cap: float,
    multiplier: float = 2.0,
    jitter_ratio: float = 0.0,
    rng: Callable[[], float] = random.random,
) -> float:
    """
    Delay before poll number ``attempt`` (0-indexed).

    ``min(base * multiplier ** attempt, cap)`` plus up to ``jitter_ratio`` of
    that value as random jitter. Units are whatever ``base`` and ``cap`` use.
    """
    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    delay = min(base * (multiplier ** attempt), cap)
    if jitter_ratio > 0:
        delay += delay * jitter_ratio * rng()
    return delay


class PollState(str, Enum):
    """Interpretation of a single status check"""
    COMPLETED = "completed"
    FAILED = "failed"
    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    PENDING = "pending"

    @property
    def is_retryable(self) -> bool:
        return self in (PollState.RATE_LIMITED, PollState.TRANSIENT, PollState.PENDING)


@dataclass(frozen=True)
class PollOutcome:
    state: PollState
    url: Optional[str] = None
    duration: Optional[float] = None
    error: Optional[str] = None
    progress: Optional[float] = None


def _duration(source: Dict[str, Any]) -> Optional[float]:
    """Positive numeric duration, else None (bool is not a number here)"""
    value = source.get("duration")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    return float(value)


def normalize_poll_response(status_code: int, payload: Optional[Dict[str, Any]]) -> PollOutcome:
    """
    Fold a status-check response into a ``PollOutcome``.

    Completed shapes, checked in priority order:
        1. ``{"video": {"url": ...}}``
        2. ``{"url": ...}``
        3. ``{"status": "completed", "output": {"url": ...}}``

    An explicit ``status == "failed"`` or an ``error`` field is a failure.
    HTTP 429 is rate limiting and any other non-2xx status is transient.
    """
    if status_code == 429:
        return PollOutcome(state=PollState.RATE_LIMITED, error="rate limited")
    if not 200 <= status_code < 300:
        return PollOutcome(state=PollState.TRANSIENT, error=f"HTTP {status_code}")
    if not isinstance(payload, dict):
        return PollOutcome(state=PollState.PENDING)

    video = payload.get("video")
    if isinstance(video, dict) and video.get("url"):
        return PollOutcome(state=PollState.COMPLETED, url=video["url"], duration=_duration(video))

    if payload.get("url"):
        return PollOutcome(state=PollState.COMPLETED, url=payload["url"], duration=_duration(payload))

    output = payload.get("output")
    if payload.get("status") == "completed" and isinstance(output, dict) and output.get("url"):
        return PollOutcome(state=PollState.COMPLETED, url=output["url"], duration=_duration(output))

    if payload.get("status") == "failed" or payload.get("error"):
        reason = payload.get("error") or payload.get("message") or "unknown"
        if isinstance(reason, dict):
            reason = reason.get("message") or str(reason)
        return PollOutcome(state=PollState.FAILED, error=str(reason))

    progress = payload.get("progress")
    return PollOutcome(
        state=PollState.PENDING,
        progress=float(progress) if isinstance(progress, (int, float)) else None,
    )


StatusFetcher = Callable[[str], Awaitable[PollOutcome]]


class BackoffPoller:
    """
    Polls a submitted job until it completes, fails, or the attempt budget
    runs out.

    The delay is applied before every check, since a job is never finished
    right after submission. Failures raise immediately; rate limiting,
    transient HTTP errors and "not ready yet" responses keep polling.
    """

    def __init__(
        self,
        base_delay: float = 2.0,
        max_delay: float = 30.0,
        multiplier: float = 2.0,
        jitter_ratio: float = 0.2,
        max_attempts: int = 60,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.multiplier = multiplier
        self.jitter_ratio = jitter_ratio
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._rng = rng

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "BackoffPoller":
        """Build a poller from ``PollingSettings``"""
        return cls(
            base_delay=settings.base_delay,
            max_delay=settings.max_delay,
            multiplier=settings.multiplier,
            jitter_ratio=settings.jitter_ratio,
            max_attempts=settings.max_attempts,
            **kwargs,
        )

    def delay_for(self, attempt: int) -> float:
        return backoff_delay(
            attempt,
            base=self.base_delay,
            cap=self.max_delay,
            multiplier=self.multiplier,
            jitter_ratio=self.jitter_ratio,
            rng=self._rng,
        )

    async def poll(self, job_id: str, fetch_status: StatusFetcher) -> PollOutcome:
        """
        Poll ``job_id`` until it completes.

        Args:
            job_id: Remote job identifier
            fetch_status: Coroutine returning a normalized ``PollOutcome``

        Returns:
            The COMPLETED outcome (carries the result url)

        Raises:
            MediaJobFailedError: The job reported failure
            MediaJobTimeoutError: ``max_attempts`` checks without completion
        """
        logger.info(f"Polling media job {job_id}", extra={"job_id": job_id})
        rate_limited = False

        for attempt in range(self.max_attempts):
            delay = self.delay_for(attempt)
            if rate_limited:
                delay += self.base_delay
            await self._sleep(delay)
            rate_limited = False

            try:
                outcome = await fetch_status(job_id)
            except (httpx.HTTPError, ValueError) as e:
                # ValueError covers undecodable JSON bodies
                logger.warning(
                    f"Poll {attempt + 1} for {job_id} errored, retrying",
                    extra={"job_id": job_id, "attempt": attempt + 1, "error": str(e)},
                )
                continue

            if outcome.state is PollState.COMPLETED:
                logger.info(
                    f"Media job {job_id} completed",
                    extra={"job_id": job_id, "attempts": attempt + 1, "url": outcome.url},
                )
                return outcome

            if not outcome.state.is_retryable:
                logger.error(
                    f"Media job {job_id} failed",
                    extra={"job_id": job_id, "attempts": attempt + 1, "reason": outcome.error},
                )
                raise MediaJobFailedError(job_id, outcome.error or "unknown")

            if outcome.state is PollState.RATE_LIMITED:
                rate_limited = True
                logger.info(f"Rate limited polling {job_id}, backing off", extra={"job_id": job_id})
            elif outcome.state is PollState.TRANSIENT:
                logger.info(
                    f"Poll {attempt + 1} for {job_id}: {outcome.error}",
                    extra={"job_id": job_id, "attempt": attempt + 1},
                )
            elif outcome.progress is not None:
                logger.debug(
                    f"Media job {job_id} progress {round(outcome.progress * 100)}%",
                    extra={"job_id": job_id},
                )

        raise MediaJobTimeoutError(job_id, self.max_attempts)
