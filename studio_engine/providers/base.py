"""Generation client protocol and registry."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from ..options import AspectRatio, ImageQuality
from ..schema import EditInstruction, GeneratedImage


class GenerationClient(Protocol):
    """Remote text/image service consumed by the engine.

    Every method is a single request/response round trip. Implementations raise
    ``GenerationFailure`` when the service returns nothing usable and never retry
    on their own.
    """

    name: str

    async def generate_text(
        self,
        prompt: str,
        *,
        use_search_grounding: bool = False,
        images: Sequence[GeneratedImage] = (),
    ) -> str:
        ...

    async def generate_structured(
        self,
        prompt: str,
        fields: Sequence[str],
        *,
        use_search_grounding: bool = False,
    ) -> dict[str, str]:
        ...

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        *,
        quality: ImageQuality = ImageQuality.BALANCED,
    ) -> GeneratedImage:
        ...

    async def edit_image(self, base_image: GeneratedImage, instruction: EditInstruction) -> GeneratedImage:
        ...

    async def analyze_image(self, image: GeneratedImage, prompt: str) -> str:
        ...


class ProviderRegistry:
    def __init__(self, providers: Iterable[GenerationClient]) -> None:
        self._providers = {provider.name: provider for provider in providers}

    def get(self, name: str) -> GenerationClient | None:
        return self._providers.get(name)

    def list(self) -> list[str]:
        return sorted(self._providers.keys())
