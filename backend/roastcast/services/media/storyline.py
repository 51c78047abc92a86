"""
Storyline parsing

The storyline model is asked for a JSON object but regularly wraps it in
prose or markdown, and sometimes returns no JSON at all. Parsing is a
best-effort step with a typed result: ``Parsed`` when the JSON was usable,
``Fallback`` (with the reason) when a templated storyline had to be built
from the raw text instead.
"""

from typing import Any, List

from roastcast.models.status import Classification
from roastcast.services.infrastructure.parsing import parse_json_object

from .prompts import NarratorTemplate
from .types import Fallback, Parsed, Storyline, StorylineParse

FALLBACK_TITLE = "Tech Drama Unfolds"
FALLBACK_VISUAL_PROMPT = "Epic tech rivalry scene with dramatic lighting"


def _clean_scenes(raw: Any, visual_prompt: str) -> List[str]:
    if isinstance(raw, list):
        scenes = [scene.strip() for scene in raw if isinstance(scene, str) and scene.strip()]
        if scenes:
            return scenes
    return [visual_prompt]


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def fallback_storyline(
    raw_text: str,
    template: NarratorTemplate,
    classification: Classification,
) -> Storyline:
    """Deterministic storyline narrating the raw model output"""
    return Storyline(
        title=FALLBACK_TITLE,
        narration_script=(raw_text or "").strip(),
        narrator=template.name,
        narrator_id=template.narrator_id,
        visual_prompt=FALLBACK_VISUAL_PROMPT,
        scenes=[FALLBACK_VISUAL_PROMPT],
        classification=classification,
    )


def parse_storyline_response(
    text: str,
    template: NarratorTemplate,
    classification: Classification,
) -> StorylineParse:
    """
    Parse the storyline model's reply.

    Args:
        text: Raw completion text
        template: Narrator the storyline was requested from
        classification: Classification that selected the template

    Returns:
        Parsed(storyline) or Fallback(storyline, reason). Never raises.
    """
    data = parse_json_object(text)
    if data is None:
        return Fallback(
            storyline=fallback_storyline(text, template, classification),
            reason="no JSON object in response",
        )

    narration = _text(data.get("storyline")) or _text(data.get("narration"))
    visual_prompt = _text(data.get("videoPrompt")) or _text(data.get("video_prompt"))
    if not narration and not visual_prompt:
        return Fallback(
            storyline=fallback_storyline(text, template, classification),
            reason="JSON object has neither storyline nor videoPrompt",
        )

    visual_prompt = visual_prompt or narration
    storyline = Storyline(
        title=_text(data.get("title")) or FALLBACK_TITLE,
        narration_script=narration,
        narrator=template.name,
        narrator_id=template.narrator_id,
        visual_prompt=visual_prompt,
        scenes=_clean_scenes(data.get("scenes"), visual_prompt),
        classification=classification,
    )
    return Parsed(storyline=storyline)


__all__ = [
    "FALLBACK_TITLE",
    "FALLBACK_VISUAL_PROMPT",
    "fallback_storyline",
    "parse_storyline_response",
]
