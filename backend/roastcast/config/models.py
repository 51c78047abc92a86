"""
Model Configuration for Pipeline Steps

This module defines all xAI models used throughout the roast generation
pipeline. Each pipeline step has its own model configuration, so a single
step can be swapped (e.g. a newer video model) without touching the services.

=== PIPELINE STEPS ===

    - classification   : one-word slop / no_slop verdict on the post
    - storyline        : narrated script, title and scene prompts (JSON)
    - video_generation : asynchronous text/image-to-video jobs
    - video_edit       : asynchronous edit/extend jobs on an existing clip
    - image_generation : thumbnail / seed frame generation

Every model name can be overridden through an environment variable named
``XAI_MODEL_<STEP>`` (for example ``XAI_MODEL_STORYLINE=grok-4``).
"""

import os
from dataclasses import dataclass, field, fields
from typing import List, Optional


@dataclass
class ModelConfig:
    """Configuration for a single model"""
    model_name: str
    temperature: Optional[float] = None
    description: str = ""

    def with_env_override(self, step: str) -> "ModelConfig":
        """Return a copy honouring ``XAI_MODEL_<STEP>`` if it is set"""
        override = os.getenv(f"XAI_MODEL_{step.upper()}")
        if not override:
            return self
        return ModelConfig(
            model_name=override,
            temperature=self.temperature,
            description=self.description,
        )


@dataclass
class PipelineModels:
    """
    Model configuration for each step of the roast pipeline.

    Pipeline Steps:
    1. Classification - Fast, deterministic verdict on the post
    2. Storyline - Creative narration in a narrator's voice
    3. Video Generation - Clip generation (text or image seeded)
    4. Video Edit - Extend/modify an existing clip
    5. Image Generation - Thumbnail and cohesive seed frame
    """

    classification: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="grok-4-fast-reasoning",
        temperature=0.0,
        description="Classify posts as slop or no_slop"
    ))

    storyline: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="grok-4-fast-reasoning",
        temperature=0.9,
        description="Generate narrated satirical storylines"
    ))

    video_generation: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="grok-imagine-video-a2",
        description="Generate short video clips"
    ))

    video_edit: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="grok-imagine-video-beta",
        description="Edit or extend generated clips"
    ))

    image_generation: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="grok-imagine-image-a1",
        description="Generate thumbnails and seed frames"
    ))


DEFAULT_PIPELINE_MODELS = PipelineModels()


def list_pipeline_steps() -> List[str]:
    """List the configurable pipeline step names"""
    return [f.name for f in fields(PipelineModels)]


def get_model_config(step: str) -> ModelConfig:
    """
    Get model configuration for a specific pipeline step

    Args:
        step: Pipeline step name (e.g., "storyline", "video_generation")

    Returns:
        ModelConfig for the step, with any env override applied

    Raises:
        ValueError: If the step is unknown
    """
    if step not in list_pipeline_steps():
        raise ValueError(f"Unknown pipeline step: {step}. Available: {list_pipeline_steps()}")
    config: ModelConfig = getattr(DEFAULT_PIPELINE_MODELS, step)
    return config.with_env_override(step)


def get_model_name(step: str) -> str:
    """Get the model name for a pipeline step"""
    return get_model_config(step).model_name


__all__ = [
    "ModelConfig",
    "PipelineModels",
    "DEFAULT_PIPELINE_MODELS",
    "list_pipeline_steps",
    "get_model_config",
    "get_model_name",
]
