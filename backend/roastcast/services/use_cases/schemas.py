"""
Request/response objects for the generation use cases.

These are plain dataclasses independent of HTTP. Routes convert the
pydantic request bodies into ``GenerationRequest`` and serialize the
outcomes back with ``to_response()``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from roastcast.core.exceptions import RequestValidationError
from roastcast.models.status import Classification
from roastcast.services.media import Storyline, StorylineContext


@dataclass(frozen=True)
class GenerationRequest:
    """
    One post to roast. Immutable once submitted.

    Attributes:
        text: The post content
        author: Post author handle (without @)
        thread_context: Previous posts in the conversation
        author_bio: Author's profile description
        author_followers: Follower count as displayed (e.g. "1.2M")
        replying_to: Handles the post replies to
        tweet_id: Echoed back in the result
    """
    text: str
    author: str
    thread_context: Optional[str] = None
    author_bio: Optional[str] = None
    author_followers: Optional[str] = None
    replying_to: Tuple[str, ...] = ()
    tweet_id: Optional[str] = None

    def validate(self) -> None:
        if not (self.text or "").strip() or not (self.author or "").strip():
            raise RequestValidationError("tweet_text and author are required")

    def storyline_context(self) -> StorylineContext:
        return StorylineContext(
            thread_context=self.thread_context,
            author_bio=self.author_bio,
            author_followers=self.author_followers,
            replying_to=self.replying_to,
        )


@dataclass
class GenerationResult:
    title: str
    narration_script: str
    narrator: str
    classification: Classification
    video_url: str
    thumbnail_url: Optional[str]
    duration: float
    target_duration: float
    scenes: List[str]
    limitation: Optional[str] = None
    tweet_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tweet_id": self.tweet_id,
            "title": self.title,
            "storyline": self.narration_script,
            "narrator": self.narrator,
            "classification": self.classification.value,
            "video_url": self.video_url,
            "thumbnail_url": self.thumbnail_url,
            "duration": self.duration,
            "target_duration": self.target_duration,
            "scenes": list(self.scenes),
            "limitation": self.limitation,
        }


@dataclass
class GenerationOutcome:
    """A finished request: the result plus its observability metadata"""
    request_id: str
    result: GenerationResult
    timings: Dict[str, int]
    cached: Dict[str, bool] = field(default_factory=dict)

    def to_response(self) -> Dict[str, Any]:
        payload = self.result.to_dict()
        payload["_meta"] = {
            "requestId": self.request_id,
            "timings": self.timings,
            "cached": dict(self.cached),
        }
        return payload


@dataclass
class StorylineOutcome:
    request_id: str
    storyline: Storyline
    timings: Dict[str, int]
    cached: bool = False

    def to_response(self) -> Dict[str, Any]:
        payload = self.storyline.to_dict()
        payload["_meta"] = {
            "requestId": self.request_id,
            "timings": self.timings,
            "cached": self.cached,
        }
        return payload


@dataclass
class BatchOutcome:
    """
    Per-item results in input order.

    Each entry is either a result dict or ``{"error": ..., "index": ...}``.
    """
    request_id: str
    results: List[Dict[str, Any]]
    timings: Dict[str, int]

    @property
    def failed(self) -> int:
        return sum(1 for item in self.results if "error" in item)

    @property
    def processed(self) -> int:
        return len(self.results) - self.failed

    def to_response(self) -> Dict[str, Any]:
        return {
            "results": self.results,
            "_meta": {
                "requestId": self.request_id,
                "timings": self.timings,
                "processed": self.processed,
                "failed": self.failed,
            },
        }


__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "GenerationOutcome",
    "StorylineOutcome",
    "BatchOutcome",
]
