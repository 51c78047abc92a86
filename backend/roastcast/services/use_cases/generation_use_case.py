"""
GenerationUseCase - orchestrates one roast request end to end.

    received -> classifying -> storyline_pending -> media_pending -> completed | failed

1. Classify the post (best effort; any failure defaults to slop).
2. Generate the storyline through the cache. Failure here fails the request,
   since every media prompt is derived from it.
3. Generate media through the cache:
     - standard: video and thumbnail concurrently, settling both. The video
       is mandatory, the thumbnail optional.
     - cohesive: thumbnail first, then image-to-video seeded with it, with
       fallback to the standard video when either step fails.

Every request records classify / storyline / media spans plus a total.
"""

import asyncio
from typing import Any, Dict, Optional, Tuple

from roastcast.config import PipelineSettings
from roastcast.core.exceptions import ThumbnailUnavailableError, VideoGenerationError
from roastcast.core.logging import generate_request_id, get_logger, set_stage
from roastcast.core.timing import Timer
from roastcast.models.status import Classification, PipelineStage
from roastcast.services.infrastructure.cache import TTLCache
from roastcast.services.media import (
    MediaGenerationClient,
    MediaResult,
    Storyline,
    ThumbnailResult,
    VideoContext,
    build_thumbnail_prompt,
)

from .base import UseCase
from .schemas import GenerationOutcome, GenerationRequest, GenerationResult, StorylineOutcome

logger = get_logger(__name__, component="generation")


class GenerationUseCase(UseCase[GenerationRequest, GenerationOutcome]):
    """Classify -> storyline -> media for a single post"""

    def __init__(
        self,
        media_client: MediaGenerationClient,
        cache: TTLCache,
        settings: Optional[PipelineSettings] = None,
    ):
        self.media = media_client
        self.cache = cache
        self.settings = settings or PipelineSettings()

    def _enter(self, stage: PipelineStage, request_id: str) -> None:
        set_stage(stage.value)
        logger.info(f"[{request_id}] Stage: {stage.value}", extra={"request_id": request_id})
        if stage.is_terminal():
            # Later log lines (timing summary, route handling) belong to no stage
            set_stage(None)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _classify(self, request: GenerationRequest, request_id: str) -> Classification:
        self._enter(PipelineStage.CLASSIFYING, request_id)
        try:
            return await self.media.classify(request.text)
        except Exception as e:
            logger.warning(
                f"[{request_id}] Classification failed, defaulting to slop: {e}",
                extra={"request_id": request_id, "step": "classify", "error": str(e)},
            )
            return Classification.default()

    def _storyline_key(self, request: GenerationRequest, classification: Classification) -> str:
        params: Dict[str, Any] = {
            "text": request.text,
            "author": request.author,
            "classification": classification.value,
        }
        params.update(request.storyline_context().as_cache_params())
        return TTLCache.generate_key("storyline", params)

    async def _storyline(
        self,
        request: GenerationRequest,
        classification: Classification,
        request_id: str,
    ) -> Tuple[Storyline, bool]:
        self._enter(PipelineStage.STORYLINE_PENDING, request_id)
        key = self._storyline_key(request, classification)
        was_cached = key in self.cache
        storyline = await self.cache.get_or_compute(
            key,
            lambda: self.media.generate_storyline(
                request.text,
                request.author,
                request.storyline_context(),
                classification,
            ),
            self.settings.storyline_ttl,
        )
        return storyline, was_cached

    async def _standard_media(
        self,
        storyline: Storyline,
        video_context: VideoContext,
        request_id: str,
    ) -> Tuple[MediaResult, Optional[str], bool]:
        video_prompt = storyline.visual_prompt or storyline.narration_script
        thumbnail_prompt = build_thumbnail_prompt(
            storyline.title, storyline.narrator, storyline.visual_prompt
        )
        video_key = TTLCache.generate_key(
            "video", {"prompt": video_prompt, "author": video_context.author}
        )
        thumbnail_key = TTLCache.generate_key("thumbnail", {"prompt": thumbnail_prompt})
        video_cached = video_key in self.cache

        async def compute_thumbnail() -> ThumbnailResult:
            thumbnail = await self.media.generate_thumbnail(thumbnail_prompt)
            if not thumbnail.available:
                # Raising keeps the sentinel out of the cache
                raise ThumbnailUnavailableError("Thumbnail generation returned no image")
            return thumbnail

        video_outcome, thumbnail_outcome = await asyncio.gather(
            self.cache.get_or_compute(
                video_key,
                lambda: self.media.generate_video(
                    video_prompt, self.settings.target_duration, video_context
                ),
                self.settings.video_ttl,
            ),
            self.cache.get_or_compute(thumbnail_key, compute_thumbnail, self.settings.video_ttl),
            return_exceptions=True,
        )

        thumbnail_url = None
        if isinstance(thumbnail_outcome, BaseException):
            logger.warning(
                f"[{request_id}] Thumbnail unavailable, continuing without it: {thumbnail_outcome}",
                extra={"request_id": request_id, "step": "thumbnail", "error": str(thumbnail_outcome)},
            )
        else:
            thumbnail_url = thumbnail_outcome.url

        if isinstance(video_outcome, BaseException):
            logger.error(
                f"[{request_id}] Video generation failed: {video_outcome}",
                extra={"request_id": request_id, "step": "video", "error": str(video_outcome)},
            )
            raise VideoGenerationError(str(video_outcome)) from video_outcome

        return video_outcome, thumbnail_url, video_cached

    async def _cohesive_media(
        self,
        storyline: Storyline,
        video_context: VideoContext,
        request_id: str,
    ) -> Tuple[MediaResult, Optional[str], bool]:
        video_prompt = storyline.visual_prompt or storyline.narration_script
        thumbnail_prompt = build_thumbnail_prompt(
            storyline.title, storyline.narrator, storyline.visual_prompt
        )
        key = TTLCache.generate_key(
            "cohesive",
            {
                "prompt": video_prompt,
                "thumbnail_prompt": thumbnail_prompt,
                "author": video_context.author,
            },
        )
        cached = self.cache.get(key)
        if cached is not None:
            return cached.video, cached.thumbnail_url, True

        try:
            media = await self.media.generate_cohesive_video(
                video_prompt,
                thumbnail_prompt,
                self.settings.target_duration,
                video_context,
            )
        except Exception as e:
            logger.error(
                f"[{request_id}] Cohesive video generation failed: {e}",
                extra={"request_id": request_id, "step": "video", "error": str(e)},
            )
            raise VideoGenerationError(str(e)) from e

        # A result without a thumbnail is served once and regenerated next time
        if media.thumbnail_url:
            self.cache.set(key, media, self.settings.video_ttl)
        else:
            logger.warning(
                f"[{request_id}] Cohesive media has no thumbnail, not caching it",
                extra={"request_id": request_id, "step": "thumbnail"},
            )
        return media.video, media.thumbnail_url, False

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def execute(
        self,
        request: GenerationRequest,
        cohesive: bool = False,
        request_id: Optional[str] = None,
        timer: Optional[Timer] = None,
    ) -> GenerationOutcome:
        """
        Run the full pipeline for one post.

        Args:
            request: The post and its optional context
            cohesive: Use the thumbnail-first media path
            request_id: Correlation id (generated if omitted)
            timer: Span collector; pass one in to read timings after a failure

        Raises:
            RequestValidationError: Missing text or author (no remote call made)
            StorylineGenerationError: Storyline step failed
            VideoGenerationError: Video branch failed
        """
        request_id = request_id or (timer.request_id if timer else generate_request_id())
        timer = timer or Timer(request_id)
        request.validate()

        self._enter(PipelineStage.RECEIVED, request_id)
        logger.info(
            f"[{request_id}] Processing roast request for @{request.author}",
            extra={"request_id": request_id, "cohesive": cohesive},
        )

        try:
            with timer.span("classify"):
                classification = await self._classify(request, request_id)
            logger.info(f"[{request_id}] Classification: {classification.value}")

            with timer.span("storyline"):
                storyline, storyline_cached = await self._storyline(
                    request, classification, request_id
                )

            self._enter(PipelineStage.MEDIA_PENDING, request_id)
            video_context = VideoContext(
                author=request.author,
                tweet_text=request.text,
                narration=storyline.narration_script,
                narrator=storyline.narrator,
            )
            with timer.span("media"):
                if cohesive:
                    video, thumbnail_url, video_cached = await self._cohesive_media(
                        storyline, video_context, request_id
                    )
                else:
                    video, thumbnail_url, video_cached = await self._standard_media(
                        storyline, video_context, request_id
                    )
        except Exception:
            self._enter(PipelineStage.FAILED, request_id)
            timer.log_summary(f"[{request_id}] Timing summary (failed)")
            raise

        self._enter(PipelineStage.COMPLETED, request_id)
        timings = timer.log_summary(f"[{request_id}] Timing summary")

        result = GenerationResult(
            title=storyline.title,
            narration_script=storyline.narration_script,
            narrator=storyline.narrator,
            classification=storyline.classification,
            video_url=video.url,
            thumbnail_url=thumbnail_url,
            duration=video.duration,
            target_duration=self.settings.target_duration,
            scenes=list(storyline.scenes),
            limitation=video.limitation,
            tweet_id=request.tweet_id,
        )
        return GenerationOutcome(
            request_id=request_id,
            result=result,
            timings=timings,
            cached={"storyline": storyline_cached, "video": video_cached},
        )

    async def storyline_only(
        self,
        request: GenerationRequest,
        request_id: Optional[str] = None,
        timer: Optional[Timer] = None,
    ) -> StorylineOutcome:
        """Classify and generate the (cached) storyline without any media"""
        request_id = request_id or (timer.request_id if timer else generate_request_id())
        timer = timer or Timer(request_id)
        request.validate()

        with timer.span("classify"):
            classification = await self._classify(request, request_id)
        with timer.span("storyline"):
            storyline, cached = await self._storyline(request, classification, request_id)

        timings = timer.log_summary(f"[{request_id}] Timing summary")
        return StorylineOutcome(
            request_id=request_id,
            storyline=storyline,
            timings=timings,
            cached=cached,
        )
