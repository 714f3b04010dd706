"""One-pass critique-and-edit refinement."""

from __future__ import annotations

from ..options import AspectRatio, ImageQuality
from ..prompts.editing import build_critique_prompt, is_perfect
from ..providers.base import GenerationClient
from ..runs.events import EventWriter
from ..schema import GeneratedImage, PlainEdit
from ..utils import truncate


class RefinementLoop:
    """Generate a base image, ask for a critique, and apply it at most once.

    A failing edit propagates instead of falling back to the base image, so the
    caller sees the variant as failed.
    """

    def __init__(self, client: GenerationClient, event_writer: EventWriter | None = None) -> None:
        self.client = client
        self.event_writer = event_writer

    async def run(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        quality: ImageQuality = ImageQuality.BALANCED,
        *,
        variant: str | None = None,
    ) -> GeneratedImage:
        base = await self.client.generate_image(prompt, aspect_ratio, quality=quality)
        critique = await self.client.analyze_image(base, build_critique_prompt(prompt))
        perfect = is_perfect(critique)
        self._emit(
            "refine_critique",
            variant=variant,
            aspect_ratio=aspect_ratio,
            perfect=perfect,
            critique=truncate(critique, 240),
        )
        if perfect:
            return base
        edited = await self.client.edit_image(base, PlainEdit(critique.strip()))
        self._emit("refine_edit_applied", variant=variant, aspect_ratio=aspect_ratio)
        return edited

    def _emit(self, event_type: str, **payload: object) -> None:
        if self.event_writer is not None:
            self.event_writer.emit(event_type, **payload)
