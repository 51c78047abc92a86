"""xAI transport (chat, video jobs, images)."""

from .client import XAIClient

__all__ = ["XAIClient"]
