"""
Application configuration and settings
"""

import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

# Model configuration
from .models import (
    ModelConfig,
    PipelineModels,
    DEFAULT_PIPELINE_MODELS,
    list_pipeline_steps,
    get_model_config,
    get_model_name,
)

from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    XAI_BASE_URL,
    XAI_TIMEOUT_SECONDS,
    DEFAULT_CACHE_TTL,
    STORYLINE_CACHE_TTL,
    VIDEO_CACHE_TTL,
    TARGET_DURATION,
    CLIP_DURATION,
    MAX_BATCH_SIZE,
    POLL_BASE_DELAY,
    POLL_MAX_DELAY,
    POLL_MULTIPLIER,
    POLL_JITTER_RATIO,
    POLL_MAX_ATTEMPTS,
)

from .settings import PollingSettings, PipelineSettings

# xAI credentials
XAI_API_KEY = os.getenv("XAI_API_KEY")
