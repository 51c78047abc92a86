"""
API schemas for generation endpoints

Request bodies for the roast endpoints. Required fields are declared
Optional on purpose: a missing ``tweet_text`` or ``author`` must produce
the pipeline's own 400 ``{"error": ...}`` body, not FastAPI's 422.
"""

from pydantic import BaseModel, Field
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from roastcast.services.use_cases.schemas import GenerationRequest


class GenerateRequest(BaseModel):
    """A post to roast, as sent by the browser extension"""
    tweet_text: Optional[str] = None
    author: Optional[str] = None
    tweet_id: Optional[str] = None
    thread_context: Optional[str] = None  # Previous tweets in the thread
    user_bio: Optional[str] = None
    user_followers: Optional[Union[str, int]] = None  # "1.2M" or a raw count
    replying_to: Optional[List[str]] = None
    cohesive: bool = False  # Thumbnail-first video generation

    def to_domain(self) -> "GenerationRequest":
        from roastcast.services.use_cases.schemas import GenerationRequest

        return GenerationRequest(
            text=(self.tweet_text or "").strip(),
            author=(self.author or "").strip().lstrip("@"),
            thread_context=self.thread_context or None,
            author_bio=self.user_bio or None,
            author_followers=str(self.user_followers) if self.user_followers else None,
            replying_to=tuple(self.replying_to or ()),
            tweet_id=self.tweet_id,
        )


class BatchGenerateRequest(BaseModel):
    """Up to MAX_BATCH_SIZE posts processed concurrently"""
    items: List[GenerateRequest] = Field(default_factory=list)


class StorylineRequest(BaseModel):
    """Storyline-only request (no media)"""
    tweet_text: Optional[str] = None
    author: Optional[str] = None
    thread_context: Optional[str] = None
    user_bio: Optional[str] = None
    user_followers: Optional[Union[str, int]] = None
    replying_to: Optional[List[str]] = None

    def to_domain(self) -> "GenerationRequest":
        return GenerateRequest(**self.model_dump()).to_domain()
