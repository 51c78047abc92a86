"""
Media Generation Client

Wraps the three remote capabilities the roast pipeline needs:

    - classify          : fast one-word verdict (slop / no_slop)
    - generate_storyline: narrated script + scene prompts from the chat model
    - generate_video    : asynchronous submit + poll video jobs (plus the
                          image-to-video and edit variants)

and the thumbnail image call. HTTP goes through ``XAIClient``; waiting on
video jobs goes through ``BackoffPoller``.

NOTE: The video API has no duration parameter. Each clip is roughly
``clip_duration`` seconds, so a longer target is reported as a limitation
on the result rather than an error. ``generate_multiple_clips`` produces
one clip per scene for callers that want to stitch a longer video.
"""

import random
from typing import List, Optional

import httpx

from roastcast.config import CLIP_DURATION, TARGET_DURATION, get_model_config, get_model_name
from roastcast.core.exceptions import RoastcastError, StorylineGenerationError
from roastcast.core.logging import get_logger
from roastcast.models.status import Classification
from roastcast.services.infrastructure.llm import LLMConfig, XAIClient
from roastcast.services.infrastructure.polling import BackoffPoller, PollOutcome

from .prompts import (
    CLASSIFY_SYSTEM,
    build_classification_prompt,
    build_storyline_messages,
    enhance_video_prompt,
    select_template,
)
from .storyline import parse_storyline_response
from .types import (
    Clip,
    ClipSet,
    CohesiveMedia,
    Fallback,
    MediaResult,
    Storyline,
    StorylineContext,
    ThumbnailResult,
    VideoContext,
)

logger = get_logger(__name__, component="media_client")

# Errors a single media call can end with; callers that degrade gracefully catch these
MEDIA_ERRORS = (RoastcastError, httpx.HTTPError, ValueError)


class MediaGenerationClient:
    """Classification, storyline, video and thumbnail generation over xAI"""

    def __init__(
        self,
        transport: XAIClient,
        poller: BackoffPoller,
        rng: Optional[random.Random] = None,
        clip_duration: float = CLIP_DURATION,
    ):
        self.transport = transport
        self.poller = poller
        self.rng = rng or random.Random()
        self.clip_duration = clip_duration

    async def aclose(self) -> None:
        await self.transport.aclose()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    async def classify(self, text: str) -> Classification:
        """
        Classify a post as slop or no_slop.

        An empty or unrecognized answer becomes ``Classification.SLOP``.
        Transport failures are raised; the pipeline decides to default.
        """
        model = get_model_config("classification")
        response = await self.transport.generate(
            build_classification_prompt(text),
            LLMConfig(
                model=model.model_name,
                temperature=model.temperature,
                max_tokens=10,
                system_instruction=CLASSIFY_SYSTEM,
            ),
        )

        classification = Classification.parse(response.text)
        if classification is None:
            logger.warning(
                "Unrecognized classification answer, defaulting to slop",
                extra={"answer": response.text[:50]},
            )
            return Classification.default()

        logger.info(f"Classified post as {classification.value}")
        return classification

    # ------------------------------------------------------------------
    # Storyline
    # ------------------------------------------------------------------

    async def generate_storyline(
        self,
        text: str,
        author: str,
        context: Optional[StorylineContext] = None,
        classification: Classification = Classification.SLOP,
    ) -> Storyline:
        """
        Generate a narrated storyline for a post.

        The narrator is chosen by classification (news anchor for no_slop,
        a random character for slop). Unusable model output produces the
        templated fallback storyline instead of an error.

        Raises:
            StorylineGenerationError: The chat completion call failed
        """
        template = select_template(classification, self.rng)
        logger.info(
            f"Generating storyline as {template.name}",
            extra={"author": author, "narrator": template.narrator_id},
        )

        system_instruction, prompt = build_storyline_messages(template, text, author, context)
        model = get_model_config("storyline")
        try:
            response = await self.transport.generate(
                prompt,
                LLMConfig(
                    model=model.model_name,
                    temperature=model.temperature,
                    system_instruction=system_instruction,
                ),
            )
        except (RoastcastError, httpx.HTTPError) as e:
            raise StorylineGenerationError(f"Storyline generation failed: {e}") from e

        result = parse_storyline_response(response.text, template, classification)
        if isinstance(result, Fallback):
            logger.warning(
                f"Storyline JSON unusable, using fallback: {result.reason}",
                extra={"response_length": len(response.text)},
            )
        return result.storyline

    # ------------------------------------------------------------------
    # Video
    # ------------------------------------------------------------------

    async def _await_job(self, job_id: str) -> PollOutcome:
        return await self.poller.poll(job_id, self.transport.fetch_video_status)

    def _media_result(self, outcome: PollOutcome, target_duration: float) -> MediaResult:
        duration = outcome.duration or self.clip_duration
        limitation = None
        if duration < target_duration:
            limitation = (
                f"xAI API generates ~{duration:g}s clips. "
                f"For {target_duration:g}s, consider generating multiple clips."
            )
        return MediaResult(
            url=outcome.url,
            duration=duration,
            target_duration=target_duration,
            limitation=limitation,
        )

    async def generate_video(
        self,
        prompt: str,
        target_duration: float = TARGET_DURATION,
        context: Optional[VideoContext] = None,
    ) -> MediaResult:
        """
        Generate a clip from a text prompt.

        Args:
            prompt: Storyline visual prompt
            target_duration: Desired length; not enforced by the API
            context: Narrator/narration used to enhance the prompt

        Raises:
            TransportError: Submission rejected
            MediaJobFailedError / MediaJobTimeoutError: From polling
        """
        enhanced = enhance_video_prompt(prompt, context)
        logger.info(
            f"Submitting video job (target {target_duration:g}s)",
            extra={"prompt": enhanced[:80]},
        )
        job_id = await self.transport.submit_video(
            get_model_name("video_generation"),
            enhanced,
        )
        outcome = await self._await_job(job_id)
        return self._media_result(outcome, target_duration)

    async def generate_video_from_image(
        self,
        prompt: str,
        image_url: str,
        target_duration: Optional[float] = None,
    ) -> MediaResult:
        """Generate a clip that starts from ``image_url``"""
        logger.info("Submitting image-to-video job", extra={"image_url": image_url[:50]})
        job_id = await self.transport.submit_video(
            get_model_name("video_generation"),
            prompt,
            image_url=image_url,
        )
        outcome = await self._await_job(job_id)
        return self._media_result(outcome, target_duration or self.clip_duration)

    async def edit_video(self, video_url: str, prompt: str) -> MediaResult:
        """Edit or extend an existing clip"""
        logger.info("Submitting video edit job", extra={"video_url": video_url[:50]})
        job_id = await self.transport.submit_video_edit(
            get_model_name("video_edit"),
            video_url,
            prompt,
        )
        outcome = await self._await_job(job_id)
        return self._media_result(outcome, self.clip_duration)

    async def generate_multiple_clips(
        self,
        scenes: List[str],
        base_image_url: Optional[str] = None,
    ) -> ClipSet:
        """
        Generate one clip per scene, sequentially.

        The first clip starts from ``base_image_url`` when given. A failed clip
        is logged and skipped; the limitation field says how many made it.
        """
        logger.info(f"Generating {len(scenes)} clips")
        clips: List[Clip] = []

        for i, scene in enumerate(scenes):
            try:
                if i == 0 and base_image_url:
                    result = await self.generate_video_from_image(scene, base_image_url)
                else:
                    result = await self.generate_video(scene, self.clip_duration)
            except MEDIA_ERRORS as e:
                logger.error(f"Clip {i + 1}/{len(scenes)} failed: {e}", extra={"scene": scene[:50]})
                continue
            clips.append(Clip(url=result.url, duration=result.duration, scene=scene))

        total_duration = sum(clip.duration for clip in clips)
        limitation = None
        if len(clips) < len(scenes):
            limitation = f"Only {len(clips)}/{len(scenes)} clips generated successfully"

        logger.info(
            f"Generated {len(clips)} clips, total duration {total_duration:g}s",
            extra={"clips": len(clips), "requested": len(scenes)},
        )
        return ClipSet(clips=clips, total_duration=total_duration, limitation=limitation)

    # ------------------------------------------------------------------
    # Thumbnail
    # ------------------------------------------------------------------

    async def generate_thumbnail(self, prompt: str) -> ThumbnailResult:
        """Generate a thumbnail; any failure yields ``ThumbnailResult(url=None)``"""
        try:
            url = await self.transport.generate_image(
                get_model_name("image_generation"),
                prompt,
            )
        except Exception as e:
            logger.error(f"Thumbnail generation failed: {e}", exc_info=not isinstance(e, MEDIA_ERRORS))
            return ThumbnailResult(url=None)

        if not url:
            logger.warning("Thumbnail response carried no image url")
            return ThumbnailResult(url=None)
        return ThumbnailResult(url=url)

    async def generate_cohesive_video(
        self,
        scene_prompt: str,
        thumbnail_prompt: str,
        target_duration: float = TARGET_DURATION,
        context: Optional[VideoContext] = None,
    ) -> CohesiveMedia:
        """
        Thumbnail-first generation: the thumbnail becomes the first frame.

        Falls back to ``generate_video`` when the thumbnail or the
        image-to-video step fails.
        """
        thumbnail = await self.generate_thumbnail(thumbnail_prompt)

        if not thumbnail.available:
            logger.info("Thumbnail failed, falling back to direct video generation")
            video = await self.generate_video(scene_prompt, target_duration, context)
            return CohesiveMedia(video=video, thumbnail_url=None)

        try:
            video = await self.generate_video_from_image(
                scene_prompt, thumbnail.url, target_duration
            )
        except MEDIA_ERRORS as e:
            logger.warning(f"Image-to-video failed, falling back to direct video: {e}")
            video = await self.generate_video(scene_prompt, target_duration, context)

        return CohesiveMedia(video=video, thumbnail_url=thumbnail.url)
