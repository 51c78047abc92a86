"""
Pipeline status constants and enumerations.

Centralized classification and stage definitions to replace magic strings
throughout the codebase.
"""

from enum import Enum
from typing import Optional


class Classification(str, Enum):
    """Coarse category of a post; selects the storyline/video template."""

    NO_SLOP = "no_slop"  # interesting tech/news content -> news anchor report
    SLOP = "slop"        # trash opinion -> a character throws it in the bin

    @classmethod
    def default(cls) -> "Classification":
        return cls.SLOP

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Classification"]:
        """Normalize a model answer ("NO_SLOP", " no-slop ", "Slop.") or return None"""
        if not raw:
            return None
        lines = raw.strip().splitlines()
        if not lines:
            return None
        token = lines[0].strip().lower().strip(" .!\"'`*")
        token = token.replace("-", "_").replace(" ", "_")
        for member in cls:
            if token == member.value:
                return member
        return None


class PipelineStage(Enum):
    """Lifecycle of a single generation request."""

    RECEIVED = "received"
    CLASSIFYING = "classifying"
    STORYLINE_PENDING = "storyline_pending"
    MEDIA_PENDING = "media_pending"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if this stage is terminal (no further progress)."""
        return self in (PipelineStage.COMPLETED, PipelineStage.FAILED)


__all__ = [
    "Classification",
    "PipelineStage",
]
