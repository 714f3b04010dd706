"""Dry-run generation client (offline)."""

from __future__ import annotations

import hashlib
import io
from typing import Sequence

from PIL import Image, ImageDraw, ImageEnhance, ImageFont

from ..errors import GenerationFailure
from ..options import AspectRatio, ImageQuality
from ..prompts.editing import CRITIQUE_SENTINEL
from ..schema import AnnotatedEdit, EditInstruction, GeneratedImage, PlainEdit
from ..utils import truncate
from .google_utils import aspect_ratio_dims

_LONG_EDGE_BY_QUALITY = {
    ImageQuality.ULTRA: 1024,
    ImageQuality.BALANCED: 768,
    ImageQuality.FASTEST: 512,
}


class DryRunClient:
    """Renders placeholder images with Pillow and answers text prompts locally.

    Critiques always come back as the sentinel, so refinement never edits.
    """

    name = "dryrun"

    def __init__(self) -> None:
        self._font = None

    async def generate_text(
        self,
        prompt: str,
        *,
        use_search_grounding: bool = False,
        images: Sequence[GeneratedImage] = (),
    ) -> str:
        grounded = " (grounded)" if use_search_grounding else ""
        return f"dryrun{grounded}: {truncate(prompt, 120)}"

    async def generate_structured(
        self,
        prompt: str,
        fields: Sequence[str],
        *,
        use_search_grounding: bool = False,
    ) -> dict[str, str]:
        if not fields:
            raise GenerationFailure("No structured fields requested.")
        subject = truncate(prompt, 60)
        return {key: f"dryrun {key} post: {subject}" for key in fields}

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        *,
        quality: ImageQuality = ImageQuality.BALANCED,
    ) -> GeneratedImage:
        width, height = aspect_ratio_dims(aspect_ratio, _LONG_EDGE_BY_QUALITY[quality])
        image = Image.new("RGB", (width, height), _color_from_prompt(prompt))
        draw = ImageDraw.Draw(image)
        font = self._font or ImageFont.load_default()
        draw.text((20, 20), f"dryrun {aspect_ratio.value}\n{prompt[:60]}", fill=(255, 255, 255), font=font)
        return _encode_png(image)

    async def edit_image(self, base_image: GeneratedImage, instruction: EditInstruction) -> GeneratedImage:
        try:
            image = Image.open(io.BytesIO(base_image.data)).convert("RGB")
        except OSError as exc:
            raise GenerationFailure("Failed to edit image.") from exc
        if isinstance(instruction, AnnotatedEdit):
            try:
                overlay = Image.open(io.BytesIO(instruction.overlay.data)).convert("RGBA")
            except OSError as exc:
                raise GenerationFailure("Failed to read overlay image.") from exc
            image.paste(overlay.resize(image.size), (0, 0), overlay.resize(image.size))
            label = f"{len(instruction.comments)} comment(s)"
        elif isinstance(instruction, PlainEdit):
            image = ImageEnhance.Brightness(image).enhance(0.85)
            label = instruction.prompt
        else:
            raise GenerationFailure(f"Unsupported edit instruction: {type(instruction).__name__}")
        draw = ImageDraw.Draw(image)
        draw.text((20, image.height - 40), f"edited: {label[:60]}", fill=(255, 255, 0), font=ImageFont.load_default())
        return _encode_png(image)

    async def analyze_image(self, image: GeneratedImage, prompt: str) -> str:
        return CRITIQUE_SENTINEL


def _encode_png(image: Image.Image) -> GeneratedImage:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return GeneratedImage(data=buffer.getvalue(), mime_type="image/png")


def _color_from_prompt(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return digest[0], digest[1], digest[2]
