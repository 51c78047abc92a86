"""
Media pipeline value types

Request-scoped results passed between the media client, the cache and the
use cases. None of these are persisted beyond the cache's TTL.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from roastcast.models.status import Classification


@dataclass(frozen=True)
class StorylineContext:
    """Optional background that makes storylines less generic"""
    thread_context: Optional[str] = None
    author_bio: Optional[str] = None
    author_followers: Optional[str] = None
    replying_to: Tuple[str, ...] = ()

    def as_cache_params(self) -> Dict[str, Any]:
        return {
            "thread_context": self.thread_context,
            "author_bio": self.author_bio,
            "author_followers": self.author_followers,
            "replying_to": list(self.replying_to),
        }


@dataclass(frozen=True)
class VideoContext:
    """What the video prompt enhancer needs to know about the storyline"""
    author: str
    tweet_text: str
    narration: Optional[str] = None
    narrator: Optional[str] = None


@dataclass
class Storyline:
    title: str
    narration_script: str
    narrator: str
    narrator_id: str
    visual_prompt: str
    scenes: List[str]
    classification: Classification

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "storyline": self.narration_script,
            "narrator": self.narrator,
            "narrator_id": self.narrator_id,
            "video_prompt": self.visual_prompt,
            "scenes": list(self.scenes),
            "classification": self.classification.value,
        }


@dataclass(frozen=True)
class Parsed:
    """The model returned a usable JSON storyline"""
    storyline: Storyline


@dataclass(frozen=True)
class Fallback:
    """The model output could not be used; ``storyline`` is the templated stand-in"""
    storyline: Storyline
    reason: str


StorylineParse = Union[Parsed, Fallback]


@dataclass
class MediaResult:
    """A completed video job"""
    url: str
    duration: float
    target_duration: float
    limitation: Optional[str] = None


@dataclass(frozen=True)
class ThumbnailResult:
    """``url is None`` means no thumbnail could be produced"""
    url: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.url is not None


@dataclass
class Clip:
    url: str
    duration: float
    scene: str


@dataclass
class ClipSet:
    clips: List[Clip] = field(default_factory=list)
    total_duration: float = 0
    limitation: Optional[str] = None


@dataclass
class CohesiveMedia:
    """Video seeded from its own thumbnail (thumbnail_url None if that step failed)"""
    video: MediaResult
    thumbnail_url: Optional[str] = None


__all__ = [
    "StorylineContext",
    "VideoContext",
    "Storyline",
    "Parsed",
    "Fallback",
    "StorylineParse",
    "MediaResult",
    "ThumbnailResult",
    "Clip",
    "ClipSet",
    "CohesiveMedia",
]
