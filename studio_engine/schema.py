"""Request, result and edit value types."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Union

from .errors import ValidationError
from .options import (
    DESIGN_VARIANTS,
    SOCIAL_VARIANT_KEYS,
    SOCIAL_VARIANTS,
    AspectRatio,
    Audience,
    DecorStyle,
    ImageQuality,
    LightingType,
    OutputVariant,
    RoomType,
    Tone,
)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^,]*)?,(?P<data>.*)$", re.DOTALL)


def mime_type_for_suffix(suffix: str) -> str | None:
    lowered = str(suffix or "").strip().lower()
    if lowered == ".png":
        return "image/png"
    if lowered in {".jpg", ".jpeg"}:
        return "image/jpeg"
    if lowered == ".webp":
        return "image/webp"
    if lowered == ".gif":
        return "image/gif"
    return None


def extension_for_mime(mime_type: str | None) -> str:
    normalized = str(mime_type or "").strip().lower()
    if normalized in {"image/jpeg", "image/jpg"}:
        return "jpg"
    if normalized == "image/webp":
        return "webp"
    if normalized == "image/gif":
        return "gif"
    return "png"


@dataclass(frozen=True)
class GeneratedImage:
    """Opaque image bytes plus their declared mime type."""

    data: bytes
    mime_type: str = "image/png"

    @classmethod
    def from_path(cls, path: str | Path) -> "GeneratedImage":
        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise ValidationError(f"Could not read image {source}: {exc}") from exc
        return cls(data=data, mime_type=mime_type_for_suffix(source.suffix) or "image/png")

    @classmethod
    def from_data_url(cls, data_url: str) -> "GeneratedImage":
        match = _DATA_URL_RE.match(str(data_url or "").strip())
        if not match:
            raise ValidationError("Invalid data URL format.")
        try:
            data = base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("Invalid base64 payload in data URL.") from exc
        return cls(data=data, mime_type=match.group("mime") or "image/jpeg")

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @property
    def extension(self) -> str:
        return extension_for_mime(self.mime_type)

    def write(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


@dataclass(frozen=True)
class DesignOptions:
    room_type: RoomType
    decor_style: DecorStyle
    lighting: LightingType


@dataclass(frozen=True)
class SocialOptions:
    tone: Tone
    audience: Audience


RequestOptions = Union[DesignOptions, SocialOptions]


@dataclass(frozen=True)
class GenerationRequest:
    subject: str
    options: RequestOptions
    quality: ImageQuality = ImageQuality.BALANCED
    reference_images: tuple[GeneratedImage, ...] = ()
    use_grounding: bool = False
    use_advanced_refinement: bool = False
    output_variants: tuple[OutputVariant, ...] = ()

    @property
    def flow(self) -> str:
        return "social" if isinstance(self.options, SocialOptions) else "design"

    @property
    def variants(self) -> tuple[OutputVariant, ...]:
        if self.output_variants:
            return self.output_variants
        return SOCIAL_VARIANTS if self.flow == "social" else DESIGN_VARIANTS

    def validate(self) -> None:
        if not str(self.subject or "").strip():
            if self.flow == "social":
                raise ValidationError("Please enter an idea.")
            raise ValidationError("Please describe your room.")
        if not isinstance(self.options, (DesignOptions, SocialOptions)):
            raise ValidationError(f"Unsupported request options: {type(self.options).__name__}")
        keys = [variant.key for variant in self.variants]
        if len(set(keys)) != len(keys):
            raise ValidationError(f"Duplicate output variant keys: {', '.join(keys)}")
        if self.flow == "social":
            unknown = [key for key in keys if key not in SOCIAL_VARIANT_KEYS]
            if unknown:
                raise ValidationError(f"Unknown social variant(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class ArtifactVariant:
    key: str
    label: str
    aspect_ratio: AspectRatio
    image: GeneratedImage | None = None
    content: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class GeneratedArtifactSet:
    flow: str
    text: str
    variants: tuple[ArtifactVariant, ...]
    reference_style: str | None = None

    def variant(self, key: str) -> ArtifactVariant:
        for variant in self.variants:
            if variant.key == key:
                return variant
        raise KeyError(key)

    def keys(self) -> list[str]:
        return [variant.key for variant in self.variants]

    def replace_image(self, key: str, image: GeneratedImage) -> "GeneratedArtifactSet":
        self.variant(key)
        variants = tuple(
            replace(variant, image=image, error=None) if variant.key == key else variant
            for variant in self.variants
        )
        return replace(self, variants=variants)

    def replace_content(self, key: str, content: str) -> "GeneratedArtifactSet":
        self.variant(key)
        variants = tuple(
            replace(variant, content=content) if variant.key == key else variant for variant in self.variants
        )
        return replace(self, variants=variants, text=_joined_text(self.flow, self.text, variants))


def join_social_posts(variants: tuple[ArtifactVariant, ...]) -> str:
    blocks = [f"{variant.label}:\n{variant.content}" for variant in variants if variant.content]
    return "\n\n".join(blocks)


def _joined_text(flow: str, text: str, variants: tuple[ArtifactVariant, ...]) -> str:
    if flow != "social":
        return text
    return join_social_posts(variants) or text


@dataclass(frozen=True)
class Comment:
    """A point-anchored note; x and y are percentages of the image size."""

    x: float
    y: float
    text: str


@dataclass(frozen=True)
class PlainEdit:
    prompt: str


@dataclass(frozen=True)
class AnnotatedEdit:
    overlay: GeneratedImage
    comments: tuple[Comment, ...] = field(default_factory=tuple)


EditInstruction = Union[PlainEdit, AnnotatedEdit]


def validate_edit(instruction: EditInstruction) -> None:
    if isinstance(instruction, PlainEdit):
        if not str(instruction.prompt or "").strip():
            raise ValidationError("Please describe the edit to apply.")
        return
    if isinstance(instruction, AnnotatedEdit):
        if not instruction.overlay.data:
            raise ValidationError("Annotated edits require an overlay image.")
        for comment in instruction.comments:
            if not (0.0 <= comment.x <= 100.0 and 0.0 <= comment.y <= 100.0):
                raise ValidationError(f"Comment position out of range: ({comment.x}, {comment.y})")
        return
    raise ValidationError(f"Unsupported edit instruction: {type(instruction).__name__}")


@dataclass(frozen=True)
class SavedArtifact:
    id: str
    timestamp: int
    artifact: GeneratedArtifactSet
    inspiration_images: tuple[GeneratedImage, ...] = ()
