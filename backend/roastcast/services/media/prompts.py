"""
Roast Generation Prompts

Centralizes the prompt text for every model call of the pipeline:
- Classification (slop / no_slop verdict)
- Narrator templates and the storyline request
- Video prompt enhancement per narrator branch
- Thumbnail prompt

Narrator templates form a fixed, enumerable set. ``no_slop`` posts always
get the news anchor; ``slop`` posts get one of the character templates,
picked with an injected ``random.Random`` so tests can pin the choice.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from roastcast.models.status import Classification

from .types import StorylineContext, VideoContext


@dataclass
class PromptTemplate:
    """
    A prompt template with placeholders.

    Usage:
        template = PromptTemplate(
            template="Hello {name}!",
            description="A greeting"
        )
        result = template.format(name="World")
    """
    template: str
    description: str = ""

    def format(self, **kwargs) -> str:
        """Format the template, leaving literal JSON braces intact"""
        result = self.template
        for k, v in kwargs.items():
            result = result.replace("{" + k + "}", str(v))
        return result

    def __str__(self) -> str:
        return f"PromptTemplate({self.description})"


# =============================================================================
# CLASSIFICATION
# =============================================================================

CLASSIFY_SYSTEM = """You sort posts from X into exactly two buckets.

no_slop: interesting tech or news content. Product launches, research results,
company announcements, real industry drama with substance.

slop: trash opinions. Hustle-culture advice, engagement bait, hot takes with
nothing behind them, vague motivational posts.

Answer with a single word: no_slop or slop. No punctuation, no explanation."""

CLASSIFY_POST = PromptTemplate(
    template='Classify this post:\n\n"{text}"',
    description="One-word slop / no_slop verdict",
)


def build_classification_prompt(text: str) -> str:
    return CLASSIFY_POST.format(text=text)


# =============================================================================
# NARRATOR TEMPLATES
# =============================================================================

@dataclass(frozen=True)
class NarratorTemplate:
    """A narrator persona and the branch it belongs to"""
    narrator_id: str
    name: str
    style: str
    classification: Classification

    @property
    def is_news_anchor(self) -> bool:
        return self.classification is Classification.NO_SLOP


NEWS_ANCHOR = NarratorTemplate(
    narrator_id="elon_musk",
    name="Elon Musk",
    style="""You are Elon Musk anchoring an evening tech news broadcast.
Deliver the story straight-faced, like breaking news, with dry one-liners.
Drop references to rockets, memes and "first principles" where they fit.
Keep it to what a news anchor can say in under ten seconds.""",
    classification=Classification.NO_SLOP,
)

CHARACTER_TEMPLATES: Tuple[NarratorTemplate, ...] = (
    NarratorTemplate(
        narrator_id="spongebob",
        name="SpongeBob SquarePants",
        style="""You are SpongeBob SquarePants reading a terrible post out loud.
Be relentlessly cheerful right up until you realise how dumb it is.
Mention the Krusty Krab, jellyfishing or Squidward's disapproval.""",
        classification=Classification.SLOP,
    ),
    NarratorTemplate(
        narrator_id="peter_griffin",
        name="Peter Griffin",
        style="""You are Peter Griffin reading a terrible post out loud.
Open with "This is worse than that time I..." and a quick absurd cutaway.
Laugh at your own jokes. Finish by declaring it garbage.""",
        classification=Classification.SLOP,
    ),
    NarratorTemplate(
        narrator_id="patrick_star",
        name="Patrick Star",
        style="""You are Patrick Star reading a terrible post out loud.
Misunderstand it confidently, then land on an accidentally brilliant insult.
Keep sentences short and slow.""",
        classification=Classification.SLOP,
    ),
    NarratorTemplate(
        narrator_id="eric_cartman",
        name="Eric Cartman",
        style="""You are Eric Cartman reading a terrible post out loud.
Be outraged, scheming and petty. "Screw you guys" is allowed.
Mock the author mercilessly but keep it about the post.""",
        classification=Classification.SLOP,
    ),
    NarratorTemplate(
        narrator_id="homer_simpson",
        name="Homer Simpson",
        style="""You are Homer Simpson reading a terrible post out loud.
Get distracted by donuts, say "D'oh!" when the point finally lands,
and throw it away with a lazy shrug.""",
        classification=Classification.SLOP,
    ),
)

ALL_NARRATOR_TEMPLATES: Tuple[NarratorTemplate, ...] = (NEWS_ANCHOR,) + CHARACTER_TEMPLATES


def select_template(classification: Classification, rng: random.Random) -> NarratorTemplate:
    """Pick the narrator for a classification (rng only used for characters)"""
    if classification is Classification.NO_SLOP:
        return NEWS_ANCHOR
    return rng.choice(CHARACTER_TEMPLATES)


def find_template(narrator: Optional[str]) -> Optional[NarratorTemplate]:
    """Look a template up by id or display name"""
    if not narrator:
        return None
    for template in ALL_NARRATOR_TEMPLATES:
        if narrator in (template.narrator_id, template.name):
            return template
    return None


# =============================================================================
# STORYLINE
# =============================================================================

STORYLINE_SYSTEM_SUFFIX = """

CRITICAL: Stay completely in character. Use their exact phrases, speech patterns, and comedic style. The output must be immediately recognizable as this character speaking."""

NEWS_REPORT_REQUEST = PromptTemplate(
    template="""Report on this post AS {narrator}, anchoring a tech news segment. Stay 100% in character.

@{author}: "{text}"{context}

Return JSON:
{
  "title": "Headline in {narrator}'s voice",
  "storyline": "2-3 sentences the anchor says on air",
  "videoPrompt": "{narrator} at a professional news desk (1 sentence)",
  "scenes": ["Scene 1 description", "Scene 2 description", "Scene 3 description"]
}""",
    description="News anchor storyline for no_slop posts",
)

TRASH_REQUEST = PromptTemplate(
    template="""Roast this post AS {narrator}. Stay 100% in character.
{narrator} reads it, is disgusted, crumples it up and throws it in the garbage.

@{author}: "{text}"{context}

Return JSON:
{
  "title": "Episode title in {narrator}'s voice",
  "storyline": "2-3 sentences of narration with {narrator}'s signature phrases",
  "videoPrompt": "Visual scene description (1 sentence)",
  "scenes": ["Scene 1 description", "Scene 2 description", "Scene 3 description"]
}""",
    description="Character trash-throwing storyline for slop posts",
)


def build_context_block(author: str, context: Optional[StorylineContext]) -> str:
    """Render the optional thread/author background appended to the post"""
    if context is None:
        return ""

    block = ""
    if context.thread_context:
        block += f"\n\nTHREAD CONTEXT (previous tweets in conversation):\n{context.thread_context}"
    if context.author_bio:
        block += f"\n\nABOUT @{author}: {context.author_bio}"
    if context.author_followers:
        block += f" ({context.author_followers} followers)"
    if context.replying_to:
        block += f"\n\nREPLYING TO: {', '.join(context.replying_to)}"
    return block


def build_storyline_messages(
    template: NarratorTemplate,
    text: str,
    author: str,
    context: Optional[StorylineContext] = None,
) -> Tuple[str, str]:
    """Return (system_instruction, user_prompt) for the storyline call"""
    request = NEWS_REPORT_REQUEST if template.is_news_anchor else TRASH_REQUEST
    user_prompt = request.format(
        narrator=template.name,
        author=author,
        text=text,
        context=build_context_block(author, context),
    )
    return template.style + STORYLINE_SYSTEM_SUFFIX, user_prompt


# =============================================================================
# VIDEO / THUMBNAIL
# =============================================================================

TWEET_PREVIEW_LENGTH = 50


def enhance_video_prompt(prompt: str, context: Optional[VideoContext] = None) -> str:
    """
    Turn the storyline's visual prompt into the prompt sent to the video model.

    The news anchor gets a news desk scene speaking the narration. Characters
    read the post, crumple it and throw it in a bin. Without a narrator and a
    narration the prompt is used as-is.
    """
    if context is None or not context.narration or not context.narrator:
        return prompt

    template = find_template(context.narrator)
    if template is not None and template.is_news_anchor:
        return (
            f"{context.narrator} as a news anchor at a professional news desk. "
            f'Speaking these EXACT words: "{context.narration}"\n\n'
            f"SCENE: {prompt}"
        )

    preview = (context.tweet_text or "")[:TWEET_PREVIEW_LENGTH] or "trash opinion"
    return (
        f"{context.narrator} holding a piece of paper with a tweet on it "
        f'that reads "{preview}". '
        f'Speaking these EXACT words: "{context.narration}"\n\n'
        f"VISUAL: {context.narrator} reads the paper with disgust, crumples it up, "
        f"and throws it into a garbage bin."
    )


def build_thumbnail_prompt(title: str, narrator: str, visual_prompt: str) -> str:
    return (
        f"Bold cinematic thumbnail for a satirical short titled \"{title}\". "
        f"{narrator} front and center, exaggerated expression. {visual_prompt}. "
        f"High contrast, vivid colors, no text overlay."
    )


__all__ = [
    "PromptTemplate",
    "CLASSIFY_SYSTEM",
    "build_classification_prompt",
    "NarratorTemplate",
    "NEWS_ANCHOR",
    "CHARACTER_TEMPLATES",
    "ALL_NARRATOR_TEMPLATES",
    "select_template",
    "find_template",
    "build_context_block",
    "build_storyline_messages",
    "enhance_video_prompt",
    "build_thumbnail_prompt",
]
