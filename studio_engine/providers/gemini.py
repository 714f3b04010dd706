"""Gemini / Imagen generation client (google-genai async API)."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Sequence, TypeVar

from google import genai
from google.genai import types

from ..config import StudioConfig
from ..errors import GenerationFailure
from ..models.registry import ModelRegistry
from ..options import AspectRatio, ImageQuality
from ..prompts.editing import build_edit_prompt
from ..schema import AnnotatedEdit, EditInstruction, GeneratedImage
from .google_utils import (
    extract_generated_images,
    extract_image_parts,
    extract_text,
    parse_structured_text,
    structured_output_instruction,
    validate_structured_fields,
)

_T = TypeVar("_T")


class GeminiClient:
    name = "gemini"

    def __init__(
        self,
        config: StudioConfig | None = None,
        *,
        client: Any | None = None,
        registry: ModelRegistry | None = None,
    ) -> None:
        self.config = config or StudioConfig.from_env()
        self.registry = registry or ModelRegistry()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise GenerationFailure("GEMINI_API_KEY (or GOOGLE_API_KEY / API_KEY) not set.")
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    async def _call(self, operation: str, awaitable: Awaitable[_T]) -> _T:
        timeout = self.config.request_timeout_s
        try:
            if timeout:
                return await asyncio.wait_for(awaitable, timeout=timeout)
            return await awaitable
        except GenerationFailure:
            raise
        except asyncio.TimeoutError as exc:
            raise GenerationFailure(f"Gemini {operation} timed out after {timeout:g}s.") from exc
        except Exception as exc:
            raise GenerationFailure(f"Gemini {operation} request failed.") from exc

    async def generate_text(
        self,
        prompt: str,
        *,
        use_search_grounding: bool = False,
        images: Sequence[GeneratedImage] = (),
    ) -> str:
        client = self._get_client()
        parts = [_image_part(image) for image in images]
        parts.append(types.Part.from_text(text=prompt))
        config = types.GenerateContentConfig(tools=_grounding_tools(use_search_grounding))
        response = await self._call(
            "text",
            client.aio.models.generate_content(
                model=self.config.text_model,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            ),
        )
        text = extract_text(response)
        if not text:
            raise GenerationFailure("Gemini returned no text.")
        return text

    async def generate_structured(
        self,
        prompt: str,
        fields: Sequence[str],
        *,
        use_search_grounding: bool = False,
    ) -> dict[str, str]:
        client = self._get_client()
        if use_search_grounding:
            # The search tool cannot be combined with a response schema.
            config = types.GenerateContentConfig(tools=_grounding_tools(True))
            contents: Any = f"{prompt}\n\n{structured_output_instruction(fields)}"
        else:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_fields_schema(fields),
            )
            contents = prompt
        response = await self._call(
            "structured text",
            client.aio.models.generate_content(
                model=self.config.text_model,
                contents=contents,
                config=config,
            ),
        )
        text = extract_text(response)
        if not text:
            raise GenerationFailure("Gemini returned no text.")
        if use_search_grounding:
            return parse_structured_text(text, fields)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GenerationFailure("The service returned structured output that could not be parsed.") from exc
        return validate_structured_fields(payload, fields)

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        *,
        quality: ImageQuality = ImageQuality.BALANCED,
    ) -> GeneratedImage:
        client = self._get_client()
        model = self.config.image_model_for(quality, self.registry)
        config = types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type="image/png",
            aspect_ratio=aspect_ratio.value,
        )
        response = await self._call(
            "image",
            client.aio.models.generate_images(model=model, prompt=prompt, config=config),
        )
        images = extract_generated_images(response)
        if not images:
            raise GenerationFailure("No image was generated.")
        return images[0]

    async def edit_image(self, base_image: GeneratedImage, instruction: EditInstruction) -> GeneratedImage:
        client = self._get_client()
        parts = [_image_part(base_image)]
        if isinstance(instruction, AnnotatedEdit):
            parts.append(_image_part(instruction.overlay))
        parts.append(types.Part.from_text(text=build_edit_prompt(instruction)))
        response = await self._call(
            "edit",
            client.aio.models.generate_content(
                model=self.config.edit_model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            ),
        )
        images = extract_image_parts(getattr(response, "candidates", None) or [])
        if not images:
            raise GenerationFailure("Failed to edit image.")
        return images[0]

    async def analyze_image(self, image: GeneratedImage, prompt: str) -> str:
        client = self._get_client()
        config_kwargs: dict[str, Any] = {}
        if self.config.critique_thinking_budget > 0:
            config_kwargs["thinking_config"] = types.ThinkingConfig(
                thinking_budget=self.config.critique_thinking_budget
            )
        response = await self._call(
            "analysis",
            client.aio.models.generate_content(
                model=self.config.analysis_model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[_image_part(image), types.Part.from_text(text=prompt)],
                    )
                ],
                config=types.GenerateContentConfig(**config_kwargs),
            ),
        )
        text = extract_text(response)
        if not text:
            raise GenerationFailure("Gemini returned no analysis.")
        return text


def _image_part(image: GeneratedImage) -> types.Part:
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


def _grounding_tools(enabled: bool) -> list[types.Tool]:
    if not enabled:
        return []
    return [types.Tool(google_search=types.GoogleSearch())]


def _fields_schema(fields: Sequence[str]) -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={key: types.Schema(type=types.Type.STRING) for key in fields},
        required=list(fields),
    )
