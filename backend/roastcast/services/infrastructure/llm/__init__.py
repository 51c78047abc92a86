"""LLM infrastructure - provider interface and the xAI transport."""

from .base import LLMConfig, LLMProvider, LLMResponse, ProviderType, UsageStats
from .xai import XAIClient

__all__ = ["LLMConfig", "LLMProvider", "LLMResponse", "ProviderType", "UsageStats", "XAIClient"]
