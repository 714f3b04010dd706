"""Core studio engine orchestration."""

from __future__ import annotations

import asyncio
import time
from typing import Any

from .config import StudioConfig
from .errors import GenerationFailure, StudioError, ValidationError
from .options import OutputVariant, platform_for_variant
from .prompts import (
    build_artifact_prompt,
    build_rationale_prompt,
    build_reference_style_prompt,
    build_social_copy_prompt,
    build_social_image_prompt,
    build_social_reference_style_prompt,
    build_text_edit_prompt,
)
from .providers.base import GenerationClient
from .refine.loop import RefinementLoop
from .runs.events import EventWriter
from .schema import (
    AnnotatedEdit,
    ArtifactVariant,
    DesignOptions,
    EditInstruction,
    GeneratedArtifactSet,
    GeneratedImage,
    GenerationRequest,
    SocialOptions,
    join_social_posts,
    validate_edit,
)
from .utils import truncate

_NO_TEXT = "The service returned no text."


def _require_text(text: str | None) -> str:
    stripped = str(text or "").strip()
    if not stripped:
        raise GenerationFailure(_NO_TEXT)
    return stripped


class StudioEngine:
    """Turns one generation request into one artifact set.

    The reference-style digest and the text step are hard dependencies: their
    failure aborts the request. Each image variant is soft and degrades to an
    empty slot when its generation fails.
    """

    def __init__(
        self,
        client: GenerationClient,
        events: EventWriter | None = None,
        config: StudioConfig | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.events = events
        self.refinement = RefinementLoop(client, self.events)
        for reason in getattr(config, "fallbacks", ()) or ():
            self._emit("model_fallback", reason=reason)

    def _emit(self, event_type: str, **payload: Any) -> None:
        if self.events is not None:
            self.events.emit(event_type, **payload)

    async def generate(self, request: GenerationRequest) -> GeneratedArtifactSet:
        request.validate()
        started = time.monotonic()
        variants = request.variants
        self._emit(
            "request_started",
            flow=request.flow,
            subject=truncate(request.subject, 200),
            options=request.options,
            quality=request.quality,
            variants=[variant.key for variant in variants],
            reference_images=len(request.reference_images),
            use_grounding=request.use_grounding,
            use_advanced_refinement=request.use_advanced_refinement,
            provider=self.client.name,
        )
        try:
            digest = await self._reference_style(request)
            text_result, *images = await asyncio.gather(
                self._generate_text(request),
                *(self._generate_variant(request, variant, digest) for variant in variants),
            )
        except StudioError as exc:
            self._emit("request_failed", flow=request.flow, error=str(exc))
            raise

        assembled = []
        for variant, (image, error) in zip(variants, images):
            content = text_result.get(variant.key) if isinstance(text_result, dict) else None
            assembled.append(
                ArtifactVariant(
                    key=variant.key,
                    label=variant.label,
                    aspect_ratio=variant.aspect_ratio,
                    image=image,
                    content=content,
                    error=error,
                )
            )
        assembled_variants = tuple(assembled)
        if isinstance(text_result, dict):
            text = join_social_posts(assembled_variants)
        else:
            text = text_result
        result = GeneratedArtifactSet(
            flow=request.flow,
            text=text,
            variants=assembled_variants,
            reference_style=digest,
        )
        self._emit(
            "request_finished",
            flow=request.flow,
            elapsed_s=round(time.monotonic() - started, 3),
            variants=[variant.key for variant in assembled_variants],
            failed=[variant.key for variant in assembled_variants if variant.image is None],
        )
        return result

    async def _reference_style(self, request: GenerationRequest) -> str | None:
        if not request.reference_images:
            return None
        if request.flow == "social":
            prompt = build_social_reference_style_prompt()
        else:
            prompt = build_reference_style_prompt()
        digest = _require_text(await self.client.generate_text(prompt, images=request.reference_images))
        self._emit(
            "reference_style_extracted",
            images=len(request.reference_images),
            digest=truncate(digest, 240),
        )
        return digest

    async def _generate_text(self, request: GenerationRequest) -> str | dict[str, str]:
        options = request.options
        if isinstance(options, SocialOptions):
            fields = [variant.key for variant in request.variants]
            posts = await self.client.generate_structured(
                build_social_copy_prompt(request.subject, options.tone, options.audience),
                fields,
                use_search_grounding=request.use_grounding,
            )
            posts = {key: str(value or "").strip() for key, value in posts.items()}
            if not any(posts.values()):
                raise GenerationFailure(_NO_TEXT)
            self._emit("text_generated", flow="social", fields=sorted(posts), grounded=request.use_grounding)
            return posts
        if not isinstance(options, DesignOptions):
            raise ValidationError(f"Unsupported options: {type(options).__name__}")
        text = _require_text(
            await self.client.generate_text(
                build_rationale_prompt(request.subject, options.room_type),
                use_search_grounding=request.use_grounding,
            )
        )
        self._emit("text_generated", flow="design", chars=len(text), grounded=request.use_grounding)
        return text

    async def _generate_variant(
        self,
        request: GenerationRequest,
        variant: OutputVariant,
        digest: str | None,
    ) -> tuple[GeneratedImage | None, str | None]:
        prompt = self._artifact_prompt(request, variant, digest)
        try:
            if request.use_advanced_refinement:
                image = await self.refinement.run(
                    prompt, variant.aspect_ratio, request.quality, variant=variant.key
                )
            else:
                image = await self.client.generate_image(prompt, variant.aspect_ratio, quality=request.quality)
        except GenerationFailure as exc:
            self._emit(
                "variant_failed",
                variant=variant.key,
                aspect_ratio=variant.aspect_ratio,
                error=str(exc),
            )
            return None, str(exc)
        self._emit(
            "variant_generated",
            variant=variant.key,
            aspect_ratio=variant.aspect_ratio,
            mime_type=image.mime_type,
            bytes=len(image.data),
        )
        return image, None

    def _artifact_prompt(self, request: GenerationRequest, variant: OutputVariant, digest: str | None) -> str:
        options = request.options
        if isinstance(options, SocialOptions):
            return build_social_image_prompt(
                request.subject,
                options.tone,
                options.audience,
                platform_for_variant(variant),
                variant.aspect_ratio,
                digest,
            )
        if not isinstance(options, DesignOptions):
            raise ValidationError(f"Unsupported options: {type(options).__name__}")
        return build_artifact_prompt(
            request.subject,
            options.room_type,
            options.decor_style,
            options.lighting,
            digest,
        )

    async def apply_edit(self, base_image: GeneratedImage, instruction: EditInstruction) -> GeneratedImage:
        validate_edit(instruction)
        if not base_image.data:
            raise ValidationError("No image to edit.")
        edited = await self.client.edit_image(base_image, instruction)
        payload: dict[str, Any] = {"kind": "plain"}
        if isinstance(instruction, AnnotatedEdit):
            payload = {"kind": "annotated", "comments": len(instruction.comments)}
        self._emit("image_edited", mime_type=edited.mime_type, bytes=len(edited.data), **payload)
        return edited

    async def edit_text(self, original_text: str, instruction: str) -> str:
        if not str(instruction or "").strip():
            raise ValidationError("Please describe how to change the text.")
        if not str(original_text or "").strip():
            raise ValidationError("There is no text to edit.")
        prompt = build_text_edit_prompt(original_text, instruction.strip())
        rewritten = _require_text(await self.client.generate_text(prompt))
        self._emit("text_edited", instruction=truncate(instruction, 200), chars=len(rewritten))
        return rewritten

    async def analyze_image(self, image: GeneratedImage, question: str) -> str:
        if not str(question or "").strip():
            raise ValidationError("Please enter a question about the image.")
        if not image.data:
            raise ValidationError("Please upload an image to analyze.")
        answer = await self.client.analyze_image(image, question.strip())
        self._emit("image_analyzed", question=truncate(question, 200), chars=len(answer))
        return answer
