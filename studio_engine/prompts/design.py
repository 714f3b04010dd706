"""Prompt builders for the interior-design flow."""

from __future__ import annotations

from ..options import DecorStyle, LightingType, RoomType, describe_lighting
from .boundaries import ROOM_IMAGE_DISALLOWED, ROOM_TEXT_DISALLOWED, content_boundary


def build_rationale_prompt(subject: str, category: RoomType) -> str:
    boundary = content_boundary(
        ROOM_TEXT_DISALLOWED,
        directive="You write only about the interior design of the described room.",
        user_text=subject,
    )
    return f"""
You are an expert interior designer and writer. Turn the user's description of a room into a clear,
concise, and inspiring design rationale.

**User's Vision:** "{subject}"
**Room Type:** {category.value}

**Instructions:**
1.  Work out the mood, the function, and the key elements the user is asking for.
2.  Cover the color palette, furniture, lighting, and material textures in a logical order.
3.  Explain why these choices work together to deliver the look and the function the user wants.
4.  Use evocative, descriptive language that brings the design to life.
5.  The text accompanies a rendered image of the room, so describe rather than instruct.

{boundary}

Return ONLY the design rationale.
""".strip()


def build_artifact_prompt(
    subject: str,
    category: RoomType,
    style: DecorStyle,
    modifier: LightingType,
    reference_style_digest: str | None,
) -> str:
    if reference_style_digest:
        style_line = (
            "4.  **CRITICAL STYLE MANDATE:** The style guide below was derived from the user's reference "
            "images and is the most important instruction. Follow it exactly. It OVERRIDES the generic "
            f"'{style.value}' decor style wherever the two conflict. Style Guide: **{reference_style_digest}**"
        )
    else:
        style_line = f"4.  The primary decor style MUST be: **{style.value}**."
    lighting_hint = describe_lighting(modifier)
    lighting_line = f"5.  The lighting MUST be: **{modifier.value}**."
    if lighting_hint:
        lighting_line = f"{lighting_line} {lighting_hint}"
    boundary = content_boundary(
        ROOM_IMAGE_DISALLOWED,
        directive=(
            "You are an interior design visualizer. Your SOLE function is to produce images of room "
            "interiors, furniture, and decor."
        ),
        user_text=subject,
    )
    return f"""
**Primary Task:** Generate one high-quality, photorealistic image of a room's interior design.

**Instructions:**
1.  You are an expert interior design visualizer. Your ONLY output is a single image of a room.
2.  The room concept is: "{subject}".
3.  The room type MUST be: **{category.value}**.
{style_line}
{lighting_line}
6.  Compose the image like a realistic interior photograph: believable textures, shadows, and light
    falling naturally on every surface.

{boundary}

**IMAGE QUALITY:**
*   **AVOID:** Distorted perspective, unrealistic proportions, or blur.
*   **ENSURE:** A clean, aspirational, high-resolution result that could appear in an architecture magazine.

Following these instructions strictly, generate the interior design image.
""".strip()


def build_reference_style_prompt() -> str:
    boundary = content_boundary(
        ROOM_TEXT_DISALLOWED,
        directive="You describe only the interior style visible in the reference images.",
    )
    return f"""
You are an interior design consultant and prompt engineer. Study the attached reference images of rooms
and write a detailed, prescriptive style guide that an image generation model will follow to reproduce
the style as faithfully as possible.

**Cover each of these, specifically:**
*   **Color Palette:** primary, secondary, and accent colors by name ("sage green", "charcoal gray"), never just "neutral".
*   **Furniture Form:** shapes and lines ("low-profile with clean lines", "ornate and traditional"); name the style if you recognize it.
*   **Materials & Textures:** every material you can see ("light oak", "blackened steel", "boucle", "honed marble").
*   **Lighting:** quality and sources ("diffuse daylight", "warm low-level lamps", "high-contrast spotlights").
*   **Decor & Mood:** key accessories and the overall atmosphere ("abundant potted plants", "serene and calming").

**Output:** one paragraph of comma-separated descriptive phrases written as a firm mandate. Leave the next
model no room for interpretation. Do not add headings or commentary.

{boundary}
""".strip()
