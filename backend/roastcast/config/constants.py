"""
Constants configuration

API settings, CORS configuration and the pipeline's tunable limits.
Numeric limits can be overridden through environment variables.
"""

import os


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, float(default)))


# API settings
API_TITLE = "Roastcast API"
API_DESCRIPTION = "Turn posts into short satirical narrated videos"
API_VERSION = "1.0.0"

# CORS origins (the browser extension talks to the API from x.com)
CORS_ORIGINS = [
    "http://localhost:3000",
    "https://x.com",
    "https://twitter.com",
]

# xAI transport
XAI_BASE_URL = os.getenv("XAI_BASE_URL", "https://api.x.ai/v1")
XAI_TIMEOUT_SECONDS = _env_float("XAI_TIMEOUT_SECONDS", 60.0)

# Cache TTLs (seconds)
DEFAULT_CACHE_TTL = _env_float("CACHE_DEFAULT_TTL_SECONDS", 5 * 60)
STORYLINE_CACHE_TTL = _env_float("CACHE_STORYLINE_TTL_SECONDS", 10 * 60)
VIDEO_CACHE_TTL = _env_float("CACHE_VIDEO_TTL_SECONDS", 30 * 60)

# Media generation
# The video API produces fixed ~5s clips; TARGET_DURATION is a request, not a guarantee
TARGET_DURATION = _env_int("TARGET_DURATION_SECONDS", 7)
CLIP_DURATION = _env_int("CLIP_DURATION_SECONDS", 5)

# Batch protection
MAX_BATCH_SIZE = _env_int("MAX_BATCH_SIZE", 5)

# Media job polling
POLL_BASE_DELAY = _env_float("POLL_BASE_DELAY_SECONDS", 2.0)
POLL_MAX_DELAY = _env_float("POLL_MAX_DELAY_SECONDS", 30.0)
POLL_MULTIPLIER = _env_float("POLL_MULTIPLIER", 2.0)
POLL_JITTER_RATIO = _env_float("POLL_JITTER_RATIO", 0.2)
POLL_MAX_ATTEMPTS = _env_int("POLL_MAX_ATTEMPTS", 60)

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "XAI_BASE_URL",
    "XAI_TIMEOUT_SECONDS",
    "DEFAULT_CACHE_TTL",
    "STORYLINE_CACHE_TTL",
    "VIDEO_CACHE_TTL",
    "TARGET_DURATION",
    "CLIP_DURATION",
    "MAX_BATCH_SIZE",
    "POLL_BASE_DELAY",
    "POLL_MAX_DELAY",
    "POLL_MULTIPLIER",
    "POLL_JITTER_RATIO",
    "POLL_MAX_ATTEMPTS",
]
