"""Content-boundary clauses shared by every prompt builder."""

from __future__ import annotations

from typing import Sequence

ROOM_IMAGE_DISALLOWED: tuple[str, ...] = (
    "Humans or human-like figures of any age",
    "Animals or pets",
    "Logos, brands, or copyrighted material",
    "Text, captions, or watermarks",
    "Exterior scenes or landscapes",
    "Vehicles",
    "Food items",
    "Any subject matter not directly related to interior design",
)

ROOM_TEXT_DISALLOWED: tuple[str, ...] = (
    "Descriptions of people, occupants, or pets",
    "Brand names, product endorsements, or prices",
    "Topics unrelated to the room's interior design",
)

SOCIAL_IMAGE_DISALLOWED: tuple[str, ...] = (
    "Real, identifiable people or celebrities",
    "Text, captions, or watermarks",
    "Logos, brands, or copyrighted characters",
    "Graphic violence, explicit, or hateful imagery",
    "Subject matter unrelated to the content idea",
)

SOCIAL_TEXT_DISALLOWED: tuple[str, ...] = (
    "Hateful, harassing, or explicit language",
    "Claims about real, named people",
    "Fabricated statistics or guarantees presented as fact",
    "Topics unrelated to the content idea",
)

EDIT_DISALLOWED: tuple[str, ...] = (
    "Humans or human-like figures added to the image",
    "Text, captions, or watermarks",
    "Logos, brands, or copyrighted material",
    "Changes unrelated to the requested edit",
)

TEXT_EDIT_DISALLOWED: tuple[str, ...] = (
    "Hateful, harassing, or explicit language",
    "Claims about real, named people",
    "Brand names, product endorsements, or prices the original text does not contain",
    "Topics unrelated to the original text",
)


def content_boundary(
    disallowed: Sequence[str],
    *,
    directive: str,
    user_text: str | None = None,
) -> str:
    """Render the prohibited-content clause with its silent-drop override rule."""
    items = "\n".join(f"    *   **{item}.**" for item in disallowed)
    if user_text:
        source = f'the user\'s request ("{user_text}")'
    else:
        source = "the user's request"
    return (
        "**CONTENT BOUNDARIES (NON-NEGOTIABLE):**\n"
        f"*   **CORE DIRECTIVE:** {directive}\n"
        "*   **STRICTLY PROHIBITED CONTENT:** Under no circumstances may your output contain:\n"
        f"{items}\n"
        f"*   **USER REQUEST OVERRIDE:** If {source} asks for anything in the prohibited list, "
        "silently drop that part and fulfil the rest of the request. Do not refuse, do not fail, "
        "and do not mention the omission."
    )
