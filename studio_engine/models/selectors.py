"""Model selection and fallback logic."""

from __future__ import annotations

from dataclasses import dataclass

from .registry import ModelRegistry, ModelSpec


@dataclass(frozen=True)
class ModelSelection:
    model: ModelSpec
    requested: str | None
    fallback_reason: str | None = None


class ModelSelector:
    def __init__(self, registry: ModelRegistry | None = None, provider: str | None = None) -> None:
        self.registry = registry or ModelRegistry()
        self.provider = provider

    def select(self, requested: str | None, capability: str, default: str | None = None) -> ModelSelection:
        if requested:
            model = self.registry.ensure(requested, capability)
            if model:
                return ModelSelection(model=model, requested=requested)
            fallback_reason = f"Requested model '{requested}' unavailable for capability '{capability}'."
        else:
            fallback_reason = None

        if default:
            model = self.registry.ensure(default, capability)
            if model:
                return ModelSelection(model=model, requested=requested, fallback_reason=fallback_reason)

        candidates = self.registry.by_capability(capability, self.provider)
        if not candidates:
            raise RuntimeError(f"No models available for capability '{capability}'.")
        return ModelSelection(
            model=candidates[0],
            requested=requested,
            fallback_reason=fallback_reason or "No model specified; using default.",
        )
