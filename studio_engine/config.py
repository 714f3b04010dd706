"""Environment-driven configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .models.registry import ModelRegistry
from .models.selectors import ModelSelector
from .options import ImageQuality
from .utils import getenv_float, getenv_int

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_ANALYSIS_MODEL = "gemini-2.5-pro"
DEFAULT_EDIT_MODEL = "gemini-2.5-flash-image"
DEFAULT_CRITIQUE_THINKING_BUDGET = 32768
DEFAULT_GALLERY_PATH = Path.home() / ".studio" / "gallery.sqlite"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


@dataclass(frozen=True)
class StudioConfig:
    api_key: str | None = None
    provider: str = "gemini"
    text_model: str = DEFAULT_TEXT_MODEL
    analysis_model: str = DEFAULT_ANALYSIS_MODEL
    edit_model: str = DEFAULT_EDIT_MODEL
    image_model: str | None = None
    critique_thinking_budget: int = DEFAULT_CRITIQUE_THINKING_BUDGET
    request_timeout_s: float | None = None
    gallery_path: Path = DEFAULT_GALLERY_PATH
    gallery_max_bytes: int | None = None
    fallbacks: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, registry: ModelRegistry | None = None) -> "StudioConfig":
        selector = ModelSelector(registry or ModelRegistry(), provider="gemini")
        fallbacks: list[str] = []

        def _pick(env: str, capability: str, default: str) -> str:
            selection = selector.select(_env_str(env), capability, default=default)
            if selection.fallback_reason and selection.requested:
                fallbacks.append(selection.fallback_reason)
            return selection.model.name

        image_model = None
        requested_image = _env_str("STUDIO_IMAGE_MODEL")
        if requested_image:
            selection = selector.select(requested_image, "image")
            if selection.fallback_reason:
                fallbacks.append(selection.fallback_reason)
            else:
                image_model = selection.model.name

        gallery_raw = _env_str("STUDIO_GALLERY_PATH")
        return cls(
            api_key=resolve_api_key(),
            provider=(_env_str("STUDIO_PROVIDER") or "gemini").lower(),
            text_model=_pick("STUDIO_TEXT_MODEL", "text", DEFAULT_TEXT_MODEL),
            analysis_model=_pick("STUDIO_ANALYSIS_MODEL", "vision", DEFAULT_ANALYSIS_MODEL),
            edit_model=_pick("STUDIO_EDIT_MODEL", "edit", DEFAULT_EDIT_MODEL),
            image_model=image_model,
            critique_thinking_budget=getenv_int(
                "STUDIO_CRITIQUE_THINKING_BUDGET", DEFAULT_CRITIQUE_THINKING_BUDGET
            )
            or 0,
            request_timeout_s=getenv_float("STUDIO_REQUEST_TIMEOUT_S"),
            gallery_path=Path(gallery_raw).expanduser() if gallery_raw else DEFAULT_GALLERY_PATH,
            gallery_max_bytes=getenv_int("STUDIO_GALLERY_MAX_BYTES"),
            fallbacks=tuple(fallbacks),
        )

    def image_model_for(self, quality: ImageQuality, registry: ModelRegistry | None = None) -> str:
        if self.image_model:
            return self.image_model
        spec = (registry or ModelRegistry()).image_model_for_quality(quality)
        if spec is None:
            raise RuntimeError(f"No image model registered for quality '{quality.value}'.")
        return spec.name


def resolve_api_key() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = _env_str(name)
        if value:
            return value
    return None


def _env_str(name: str) -> str | None:
    value = str(os.getenv(name) or "").strip()
    return value or None
