"""Shared helpers for the Google generation client."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Mapping, Sequence

from ..errors import GenerationFailure
from ..options import AspectRatio
from ..schema import GeneratedImage

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

_RATIO_VALUES = {
    AspectRatio.SQUARE: 1.0,
    AspectRatio.WIDESCREEN: 16.0 / 9.0,
    AspectRatio.PORTRAIT: 3.0 / 4.0,
}


def aspect_ratio_dims(ratio: AspectRatio, long_edge: int = 1024) -> tuple[int, int]:
    value = _RATIO_VALUES[ratio]
    if value >= 1.0:
        return long_edge, int(round(long_edge / value))
    return int(round(long_edge * value)), long_edge


def extract_image_parts(candidates: Sequence[Any]) -> list[GeneratedImage]:
    images: list[GeneratedImage] = []
    for candidate in candidates or []:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or getattr(candidate, "parts", None) or []
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None) if inline_data else None
            if data is None:
                continue
            if isinstance(data, str):
                try:
                    data = base64.b64decode(data, validate=True)
                except binascii.Error as exc:
                    raise GenerationFailure("The service returned an unreadable image.") from exc
            if isinstance(data, (bytes, bytearray)) and data:
                mime_type = getattr(inline_data, "mime_type", None) or "image/png"
                images.append(GeneratedImage(data=bytes(data), mime_type=mime_type))
    return images


def extract_generated_images(response: Any, mime_type: str = "image/png") -> list[GeneratedImage]:
    generated = getattr(response, "generated_images", None) or []
    images: list[GeneratedImage] = []
    for item in generated:
        image = getattr(item, "image", None)
        data = getattr(image, "image_bytes", None) if image is not None else None
        if not data:
            continue
        declared = getattr(image, "mime_type", None) or mime_type
        images.append(GeneratedImage(data=bytes(data), mime_type=declared))
    return images


def extract_text(response: Any) -> str:
    text = getattr(response, "text", None)
    if isinstance(text, str) and text.strip():
        return text.strip()
    parts_out: list[str] = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) or getattr(candidate, "parts", None) or []
        for part in parts:
            chunk = getattr(part, "text", None)
            if isinstance(chunk, str) and chunk.strip():
                parts_out.append(chunk.strip())
    return "\n".join(parts_out).strip()


def extract_json_object(text: str) -> dict[str, Any] | None:
    match = _JSON_OBJECT_RE.search(str(text or ""))
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def validate_structured_fields(payload: Any, fields: Sequence[str]) -> dict[str, str]:
    """Check a structured reply has a non-empty string for every expected key."""
    if not isinstance(payload, Mapping):
        raise GenerationFailure("The service returned structured output that could not be parsed.")
    result: dict[str, str] = {}
    missing: list[str] = []
    for key in fields:
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            missing.append(key)
            continue
        result[key] = value.strip()
    if missing:
        raise GenerationFailure(
            f"The service returned structured output missing fields: {', '.join(missing)}."
        )
    return result


def parse_structured_text(text: str, fields: Sequence[str]) -> dict[str, str]:
    payload = extract_json_object(text)
    if payload is None:
        raise GenerationFailure("The service returned structured output that could not be parsed.")
    return validate_structured_fields(payload, fields)


def structured_output_instruction(fields: Sequence[str]) -> str:
    keys = ", ".join(f'"{key}"' for key in fields)
    return (
        "Respond with ONLY a JSON object (no markdown fences, no commentary) whose keys are exactly "
        f"{keys}, each mapped to a string."
    )
