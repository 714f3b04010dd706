"""Prompt builders."""

from __future__ import annotations

from .design import build_artifact_prompt, build_rationale_prompt, build_reference_style_prompt
from .editing import (
    CRITIQUE_SENTINEL,
    build_critique_prompt,
    build_edit_prompt,
    build_text_edit_prompt,
    is_perfect,
)
from .social import (
    build_social_copy_prompt,
    build_social_image_prompt,
    build_social_reference_style_prompt,
    social_field_keys,
)

__all__ = [
    "CRITIQUE_SENTINEL",
    "build_artifact_prompt",
    "build_critique_prompt",
    "build_edit_prompt",
    "build_rationale_prompt",
    "build_reference_style_prompt",
    "build_social_copy_prompt",
    "build_social_image_prompt",
    "build_social_reference_style_prompt",
    "build_text_edit_prompt",
    "is_perfect",
    "social_field_keys",
]
