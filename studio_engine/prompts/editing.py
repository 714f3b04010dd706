"""Critique, image-edit and text-edit prompt builders."""

from __future__ import annotations

from ..schema import AnnotatedEdit, EditInstruction, PlainEdit
from .boundaries import EDIT_DISALLOWED, TEXT_EDIT_DISALLOWED, content_boundary

CRITIQUE_SENTINEL = "PERFECT"


def is_perfect(critique: str) -> bool:
    return str(critique or "").strip().upper() == CRITIQUE_SENTINEL


def build_critique_prompt(original_prompt: str) -> str:
    boundary = content_boundary(
        EDIT_DISALLOWED,
        directive="Your command may only correct the image toward the original prompt.",
    )
    return f"""
You are a meticulous art director. Compare the attached generated image with the prompt it was generated
from. Find any deviation, flaw, or missed opportunity and express the fix as ONE precise, actionable
command for an image editing model.

**Original Generation Prompt:**
---
{original_prompt}
---

**Check, silently (do not show this reasoning):**
1.  **Style adherence:** does the look match the requested style?
2.  **Concept accuracy:** are the key elements of the description present?
3.  **Realism and quality:** is the lighting believable, are materials well rendered, are there artifacts
    or proportion problems?
4.  **Composition:** is the frame well balanced, and would one small change improve it?

**Output exactly one of:**
1.  A single direct editing command, if you found something to fix.
2.  The word "{CRITIQUE_SENTINEL}", if the image fully meets the prompt.
No explanations and no conversational text.

**Examples:**
*   The prompt asked for a warm throw blanket but the blanket is cold blue.
    Output: Change the throw blanket on the armchair to a warm burnt orange.
*   The room is dark although plenty of natural light was requested.
    Output: Increase the daylight coming through the window so the room feels bright and airy.
*   Everything matches and the quality is high.
    Output: {CRITIQUE_SENTINEL}

{boundary}
""".strip()


def build_edit_prompt(instruction: EditInstruction) -> str:
    boundary = content_boundary(
        EDIT_DISALLOWED,
        directive="You modify the provided base image and return only the edited image.",
    )
    if isinstance(instruction, PlainEdit):
        return f"""
Edit the provided image. {instruction.prompt.strip()}

Keep everything the instruction does not mention unchanged.

{boundary}
""".strip()

    if isinstance(instruction, AnnotatedEdit):
        if instruction.comments:
            comments = "\n".join(
                f'- Comment {idx} (near x:{round(comment.x)}%, y:{round(comment.y)}%): "{comment.text}"'
                for idx, comment in enumerate(instruction.comments, start=1)
            )
        else:
            comments = "No specific comments were provided; interpret the drawings on the overlay image."
        return f"""
You are an expert image editor. Modify the first image (the base) according to the user's annotations.
The second image is a transparent overlay whose drawings mark the areas to change. The comments below
give specific instructions, positioned as percentages of the image width and height.

**User's Comments:**
{comments}

Apply these edits precisely to the base image and return only the new version of it. The overlay
drawings are the primary guide for where to apply changes.

{boundary}
""".strip()

    raise TypeError(f"Unsupported edit instruction: {type(instruction).__name__}")


def build_text_edit_prompt(original_text: str, instruction: str) -> str:
    boundary = content_boundary(
        TEXT_EDIT_DISALLOWED,
        directive="You rewrite only the provided text and return nothing else.",
        user_text=instruction,
    )
    return f"""
You are an expert writer. Rewrite the text below so that it fulfils the instruction precisely.

**Original Text:**
"{original_text}"

**Instruction:**
"{instruction}"

Return ONLY the rewritten text, with no introduction and no markdown formatting.

{boundary}
""".strip()
