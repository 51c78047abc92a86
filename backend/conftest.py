import random

import pytest

from roastcast.config import PipelineSettings, PollingSettings


@pytest.fixture(autouse=True)
def mock_xai_env(monkeypatch):
    """Automatically provide a fake xAI environment for all tests"""
    monkeypatch.setenv("XAI_API_KEY", "test-key")
    monkeypatch.setenv("XAI_BASE_URL", "https://api.x.ai/v1")
    for step in ("CLASSIFICATION", "STORYLINE", "VIDEO_GENERATION", "VIDEO_EDIT", "IMAGE_GENERATION"):
        monkeypatch.delenv(f"XAI_MODEL_{step}", raising=False)


@pytest.fixture
def fixed_rng():
    """Seeded randomness so narrator selection is reproducible"""
    return random.Random(1234)


@pytest.fixture
def no_sleep():
    """Async sleep replacement that records requested delays"""
    delays = []

    async def sleep(delay):
        delays.append(delay)

    sleep.delays = delays
    return sleep


@pytest.fixture
def fast_settings():
    """Pipeline settings with a tiny polling budget"""
    return PipelineSettings(
        polling=PollingSettings(base_delay=0.0, max_delay=0.0, jitter_ratio=0.0, max_attempts=3),
    )


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
