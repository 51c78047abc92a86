"""
Base classes for LLM providers

Defines the abstract interface that text-completion providers implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ProviderType(str, Enum):
    """Supported LLM providers"""
    XAI = "xai"


@dataclass
class LLMConfig:
    """Configuration for an LLM request"""
    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    system_instruction: Optional[str] = None

    # Provider-specific options
    extra_options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UsageStats:
    """Token usage statistics"""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if self.total_tokens == 0:
            self.total_tokens = self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Unified response from any LLM provider"""
    text: str
    model: str
    provider: ProviderType
    usage: Optional[UsageStats] = None
    raw_response: Any = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers

    All LLM providers must implement this interface to ensure
    consistent behavior across different backends.
    """

    provider_type: ProviderType

    @abstractmethod
    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        """Generate a response from the LLM

        Args:
            prompt: The user prompt text
            config: Model, sampling and system instruction

        Returns:
            LLMResponse with the generated text and metadata
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is properly configured"""
        pass

    @property
    def name(self) -> str:
        """Get the provider name"""
        return self.provider_type.value
