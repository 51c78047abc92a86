"""
Core Module - Cross-cutting concerns and shared infrastructure

This module contains foundational utilities used across the entire application.
These are not business logic, but rather infrastructure and common patterns.

Organization:
    - logging.py: Structured logging configuration and correlation context
    - exceptions.py: Error taxonomy shared by services and routes
    - timing.py: Named timing spans reported with every response

Usage:
    from roastcast.core import get_logger, Timer, RequestValidationError
"""

# Logging
from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_stage,
    clear_context,
    generate_request_id,
)

# Exceptions
from .exceptions import (
    RoastcastError,
    RequestValidationError,
    PipelineError,
    StorylineGenerationError,
    VideoGenerationError,
    ThumbnailUnavailableError,
    InfrastructureError,
    TransportError,
    MediaJobFailedError,
    MediaJobTimeoutError,
)

# Timing
from .timing import Timer

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_stage",
    "clear_context",
    "generate_request_id",
    # Exceptions
    "RoastcastError",
    "RequestValidationError",
    "PipelineError",
    "StorylineGenerationError",
    "VideoGenerationError",
    "ThumbnailUnavailableError",
    "InfrastructureError",
    "TransportError",
    "MediaJobFailedError",
    "MediaJobTimeoutError",
    # Timing
    "Timer",
]
