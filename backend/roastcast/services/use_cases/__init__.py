"""
Use Cases package - Business logic layer.

Following Clean Architecture principles:
- Each use case is ONE business operation
- Use cases are independent of HTTP/DB/UI
- Use cases are fully testable
- Use cases can be orchestrated or chained

Modules:
- base: Base use case abstract class
- schemas: Request/outcome objects shared by the use cases
- generation_use_case: One post through classify -> storyline -> media
- batch_use_case: Several posts concurrently
"""

from .base import UseCase
from .schemas import (
    GenerationRequest,
    GenerationResult,
    GenerationOutcome,
    StorylineOutcome,
    BatchOutcome,
)
from .generation_use_case import GenerationUseCase
from .batch_use_case import BatchGenerationUseCase

__all__ = [
    "UseCase",
    "GenerationRequest",
    "GenerationResult",
    "GenerationOutcome",
    "StorylineOutcome",
    "BatchOutcome",
    "GenerationUseCase",
    "BatchGenerationUseCase",
]
