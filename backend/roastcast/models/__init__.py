"""
Pydantic models for API request schemas and pipeline enumerations
"""

from .status import Classification, PipelineStage
from .generation import GenerateRequest, BatchGenerateRequest, StorylineRequest

__all__ = [
    "Classification",
    "PipelineStage",
    "GenerateRequest",
    "BatchGenerateRequest",
    "StorylineRequest",
]
