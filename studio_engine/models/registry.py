"""Model registry for the studio engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from ..options import ImageQuality


@dataclass(frozen=True)
class ModelSpec:
    name: str
    provider: str
    capabilities: tuple[str, ...]
    quality: ImageQuality | None = None

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities


_DEFAULT_MODELS: dict[str, ModelSpec] = {
    "gemini-2.5-flash": ModelSpec(
        name="gemini-2.5-flash",
        provider="gemini",
        capabilities=("text", "vision"),
    ),
    "gemini-2.5-pro": ModelSpec(
        name="gemini-2.5-pro",
        provider="gemini",
        capabilities=("vision", "text"),
    ),
    "gemini-2.5-flash-image": ModelSpec(
        name="gemini-2.5-flash-image",
        provider="gemini",
        capabilities=("edit",),
    ),
    "imagen-4.0-generate-001": ModelSpec(
        name="imagen-4.0-generate-001",
        provider="gemini",
        capabilities=("image",),
        quality=ImageQuality.BALANCED,
    ),
    "imagen-4.0-ultra-generate-001": ModelSpec(
        name="imagen-4.0-ultra-generate-001",
        provider="gemini",
        capabilities=("image",),
        quality=ImageQuality.ULTRA,
    ),
    "imagen-4.0-fast-generate-001": ModelSpec(
        name="imagen-4.0-fast-generate-001",
        provider="gemini",
        capabilities=("image",),
        quality=ImageQuality.FASTEST,
    ),
    "dryrun-text-1": ModelSpec(
        name="dryrun-text-1",
        provider="dryrun",
        capabilities=("text", "vision"),
    ),
    "dryrun-image-1": ModelSpec(
        name="dryrun-image-1",
        provider="dryrun",
        capabilities=("image", "edit"),
    ),
}


class ModelRegistry:
    def __init__(self, models: Mapping[str, ModelSpec] | None = None) -> None:
        self._models = dict(models) if models is not None else dict(_DEFAULT_MODELS)

    def get(self, name: str) -> ModelSpec | None:
        return self._models.get(name)

    def list(self) -> Iterable[ModelSpec]:
        return self._models.values()

    def by_capability(self, capability: str, provider: str | None = None) -> list[ModelSpec]:
        return [
            model
            for model in self._models.values()
            if model.supports(capability) and (provider is None or model.provider == provider)
        ]

    def ensure(self, name: str, capability: str) -> ModelSpec | None:
        model = self.get(name)
        if model and model.supports(capability):
            return model
        return None

    def image_model_for_quality(self, quality: ImageQuality, provider: str = "gemini") -> ModelSpec | None:
        for model in self.by_capability("image", provider):
            if model.quality is quality:
                return model
        return None
