"""
Polling Module

Exponential backoff polling for asynchronous media generation jobs.

Usage:
    from roastcast.services.infrastructure.polling import BackoffPoller, backoff_delay
"""

from .poller import (
    BackoffPoller,
    PollOutcome,
    PollState,
    backoff_delay,
    normalize_poll_response,
)

__all__ = [
    "BackoffPoller",
    "PollOutcome",
    "PollState",
    "backoff_delay",
    "normalize_poll_response",
]
