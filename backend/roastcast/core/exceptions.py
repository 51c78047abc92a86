"""
Core Exceptions
Standardized exceptions for the application.
"""

from typing import Optional


class RoastcastError(Exception):
    """Base exception for all application errors."""
    pass


class RequestValidationError(RoastcastError):
    """Request rejected before any remote call (missing fields, oversized batch)."""
    pass


class PipelineError(RoastcastError):
    """Base exception for generation pipeline errors."""
    pass


class StorylineGenerationError(PipelineError):
    """The storyline step failed; the request cannot continue."""
    pass


class VideoGenerationError(PipelineError):
    """The mandatory video branch failed."""
    pass


class ThumbnailUnavailableError(PipelineError):
    """The image endpoint returned no thumbnail."""
    pass


class InfrastructureError(RoastcastError):
    """Base exception for infrastructure errors (xAI transport, media jobs)."""
    pass


class TransportError(InfrastructureError):
    """Non-success HTTP response from the xAI API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MediaJobFailedError(InfrastructureError):
    """The remote media job reported an explicit failure."""

    def __init__(self, job_id: str, reason: str):
        super().__init__(f"Video generation failed: {reason}")
        self.job_id = job_id
        self.reason = reason


class MediaJobTimeoutError(InfrastructureError):
    """The polling budget was exhausted before the job completed."""

    def __init__(self, job_id: str, attempts: int):
        super().__init__(
            f"Video generation timeout after {attempts} polling attempts (job {job_id})"
        )
        self.job_id = job_id
        self.attempts = attempts
