"""Prompt builders for the multi-platform social flow."""

from __future__ import annotations

from ..options import SOCIAL_VARIANTS, AspectRatio, Audience, SocialPlatform, Tone
from .boundaries import SOCIAL_IMAGE_DISALLOWED, SOCIAL_TEXT_DISALLOWED, content_boundary

_PLATFORM_GUIDANCE = {
    SocialPlatform.LINKEDIN: (
        "A professional post of 120-200 words. Open with a strong hook, add one or two short paragraphs "
        "of substance, and close with a question or call to action. At most three hashtags."
    ),
    SocialPlatform.TWITTER: (
        "A single post of at most 280 characters. Punchy and direct, one or two relevant hashtags."
    ),
    SocialPlatform.INSTAGRAM: (
        "A caption of 60-120 words with a visual, sensory feel, a few fitting emojis, and five to "
        "eight hashtags on the last line."
    ),
}

_ASPECT_DESCRIPTIONS = {
    AspectRatio.SQUARE: "a square 1:1 frame",
    AspectRatio.WIDESCREEN: "a wide 16:9 landscape frame",
    AspectRatio.PORTRAIT: "a tall 3:4 portrait frame",
}


def social_field_keys() -> list[str]:
    return [variant.key for variant in SOCIAL_VARIANTS]


def build_social_copy_prompt(subject: str, tone: Tone, audience: Audience) -> str:
    guidance = "\n".join(
        f'*   **"{variant.key}"** ({variant.label}): {_PLATFORM_GUIDANCE[SocialPlatform(variant.label)]}'
        for variant in SOCIAL_VARIANTS
    )
    boundary = content_boundary(
        SOCIAL_TEXT_DISALLOWED,
        directive="You write social media copy about the user's content idea and nothing else.",
        user_text=subject,
    )
    return f"""
You are a senior social media strategist. Turn one content idea into three posts, each tailored to its
platform's conventions.

**Content Idea:** "{subject}"
**Tone:** {tone.value}
**Target Audience:** {audience.value}

**Posts to write (one string per key):**
{guidance}

Keep the message consistent across platforms while adapting length, structure, and voice. Write in the
requested tone for the requested audience.

{boundary}
""".strip()


def build_social_image_prompt(
    subject: str,
    tone: Tone,
    audience: Audience,
    platform: SocialPlatform,
    aspect_ratio: AspectRatio,
    reference_style_digest: str | None,
) -> str:
    if reference_style_digest:
        style_line = (
            "*   **CRITICAL STYLE MANDATE:** Match this style guide, derived from the user's reference images, "
            "exactly. It OVERRIDES the tone-based styling below wherever they conflict. "
            f"Style Guide: **{reference_style_digest}**"
        )
    else:
        style_line = f"*   **Visual Style:** an image whose mood reads as {tone.value.lower()}."
    boundary = content_boundary(
        SOCIAL_IMAGE_DISALLOWED,
        directive="You create a single eye-catching visual that illustrates the content idea.",
        user_text=subject,
    )
    return f"""
**Primary Task:** Create one scroll-stopping image for a {platform.value} post.

**Content Idea:** "{subject}"
**Audience:** {audience.value}

**Instructions:**
*   Compose for {_ASPECT_DESCRIPTIONS[aspect_ratio]}, with the focal point placed for {platform.value}'s feed.
{style_line}
*   Favor bold composition, clean backgrounds, and strong color contrast that stays legible at thumbnail size.
*   The image must make sense on its own, without any words in it.

{boundary}
""".strip()


def build_social_reference_style_prompt() -> str:
    boundary = content_boundary(
        SOCIAL_TEXT_DISALLOWED,
        directive="You describe only the visual style of the reference images.",
    )
    return f"""
You are an art director. Study the attached reference images and write a prescriptive visual style guide
that an image generation model will follow.

Describe the color palette by name, the composition habits, the medium (photo, illustration, 3D render),
the lighting, the textures, and the overall mood. Output one paragraph of comma-separated phrases written
as a firm mandate, with no headings or commentary.

{boundary}
""".strip()
