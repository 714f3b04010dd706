"""Generation client registry."""

from __future__ import annotations

from ..config import StudioConfig
from .base import GenerationClient, ProviderRegistry
from .dryrun import DryRunClient
from .gemini import GeminiClient


def default_registry(config: StudioConfig | None = None) -> ProviderRegistry:
    return ProviderRegistry(
        [
            DryRunClient(),
            GeminiClient(config),
        ]
    )


def create_client(name: str | None = None, config: StudioConfig | None = None) -> GenerationClient:
    config = config or StudioConfig.from_env()
    registry = default_registry(config)
    wanted = (name or config.provider or "gemini").strip().lower()
    client = registry.get(wanted)
    if client is None:
        raise ValueError(f"Unknown provider '{wanted}'. Available: {', '.join(registry.list())}")
    return client
