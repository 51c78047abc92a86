"""
Media generation for the roast pipeline.

Usage:
    from roastcast.services.media import MediaGenerationClient
"""

from .client import MediaGenerationClient, MEDIA_ERRORS
from .prompts import (
    NarratorTemplate,
    NEWS_ANCHOR,
    CHARACTER_TEMPLATES,
    select_template,
    enhance_video_prompt,
    build_thumbnail_prompt,
)
from .storyline import parse_storyline_response, fallback_storyline
from .types import (
    StorylineContext,
    VideoContext,
    Storyline,
    Parsed,
    Fallback,
    MediaResult,
    ThumbnailResult,
    Clip,
    ClipSet,
    CohesiveMedia,
)

__all__ = [
    "MediaGenerationClient",
    "MEDIA_ERRORS",
    "NarratorTemplate",
    "NEWS_ANCHOR",
    "CHARACTER_TEMPLATES",
    "select_template",
    "enhance_video_prompt",
    "build_thumbnail_prompt",
    "parse_storyline_response",
    "fallback_storyline",
    "StorylineContext",
    "VideoContext",
    "Storyline",
    "Parsed",
    "Fallback",
    "MediaResult",
    "ThumbnailResult",
    "Clip",
    "ClipSet",
    "CohesiveMedia",
]
