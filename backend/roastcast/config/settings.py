"""
Pipeline settings

Groups the tunables the generation pipeline needs so they can be passed
explicitly into the use cases (and overridden per test) instead of being
read from module globals deep inside the services.
"""

from dataclasses import dataclass

from .constants import (
    CLIP_DURATION,
    DEFAULT_CACHE_TTL,
    MAX_BATCH_SIZE,
    POLL_BASE_DELAY,
    POLL_JITTER_RATIO,
    POLL_MAX_ATTEMPTS,
    POLL_MAX_DELAY,
    POLL_MULTIPLIER,
    STORYLINE_CACHE_TTL,
    TARGET_DURATION,
    VIDEO_CACHE_TTL,
)


@dataclass(frozen=True)
class PollingSettings:
    """Backoff schedule for media job polling (seconds)"""
    base_delay: float = POLL_BASE_DELAY
    max_delay: float = POLL_MAX_DELAY
    multiplier: float = POLL_MULTIPLIER
    jitter_ratio: float = POLL_JITTER_RATIO
    max_attempts: int = POLL_MAX_ATTEMPTS


@dataclass(frozen=True)
class PipelineSettings:
    """Tunables for the generation pipeline"""
    default_ttl: float = DEFAULT_CACHE_TTL
    storyline_ttl: float = STORYLINE_CACHE_TTL
    video_ttl: float = VIDEO_CACHE_TTL
    target_duration: int = TARGET_DURATION
    clip_duration: int = CLIP_DURATION
    max_batch_size: int = MAX_BATCH_SIZE
    polling: PollingSettings = PollingSettings()


__all__ = ["PollingSettings", "PipelineSettings"]
