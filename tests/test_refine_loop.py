from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from studio_engine.errors import GenerationFailure
from studio_engine.options import AspectRatio, ImageQuality
from studio_engine.refine.loop import RefinementLoop
from studio_engine.runs.events import EventWriter
from studio_engine.schema import GeneratedImage, PlainEdit

BASE = GeneratedImage(b"base-bytes")
EDITED = GeneratedImage(b"edited-bytes")


class CritiqueClient:
    name = "fake"

    def __init__(self, critique: str, *, fail_generate: bool = False, fail_edit: bool = False) -> None:
        self.critique = critique
        self.fail_generate = fail_generate
        self.fail_edit = fail_edit
        self.generate_calls: list[tuple[str, AspectRatio, ImageQuality]] = []
        self.critique_prompts: list[str] = []
        self.edits: list[object] = []

    async def generate_image(self, prompt, aspect_ratio, *, quality=ImageQuality.BALANCED):
        self.generate_calls.append((prompt, aspect_ratio, quality))
        if self.fail_generate:
            raise GenerationFailure("No image was generated.")
        return BASE

    async def analyze_image(self, image, prompt):
        assert image is BASE
        self.critique_prompts.append(prompt)
        return self.critique

    async def edit_image(self, base_image, instruction):
        assert base_image is BASE
        self.edits.append(instruction)
        if self.fail_edit:
            raise GenerationFailure("Failed to edit image.")
        return EDITED


@pytest.mark.parametrize("critique", ["PERFECT", "perfect", "  Perfect \n", "\tPERFECT"])
def test_perfect_critique_returns_base_without_edit(critique: str) -> None:
    client = CritiqueClient(critique)
    result = asyncio.run(RefinementLoop(client).run("a calm bedroom", AspectRatio.SQUARE))

    assert result.data == BASE.data
    assert client.edits == []
    assert len(client.critique_prompts) == 1
    assert "a calm bedroom" in client.critique_prompts[0]


def test_actionable_critique_applies_exactly_one_plain_edit() -> None:
    client = CritiqueClient("Make the sofa blue.")
    result = asyncio.run(
        RefinementLoop(client).run("a living room", AspectRatio.WIDESCREEN, ImageQuality.ULTRA)
    )

    assert result is EDITED
    assert client.edits == [PlainEdit("Make the sofa blue.")]
    assert client.generate_calls == [("a living room", AspectRatio.WIDESCREEN, ImageQuality.ULTRA)]


def test_edit_failure_propagates_instead_of_returning_base() -> None:
    client = CritiqueClient("Brighten the window.", fail_edit=True)
    with pytest.raises(GenerationFailure):
        asyncio.run(RefinementLoop(client).run("a kitchen", AspectRatio.PORTRAIT))
    assert len(client.edits) == 1


def test_base_failure_skips_critique() -> None:
    client = CritiqueClient("PERFECT", fail_generate=True)
    with pytest.raises(GenerationFailure):
        asyncio.run(RefinementLoop(client).run("an office", AspectRatio.SQUARE))
    assert client.critique_prompts == []
    assert client.edits == []


def test_refinement_events(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "run-1")
    client = CritiqueClient("Add a plant to the corner.")
    asyncio.run(RefinementLoop(client, writer).run("a bathroom", AspectRatio.SQUARE, variant="design"))

    events = writer.read()
    assert [event["type"] for event in events] == ["refine_critique", "refine_edit_applied"]
    assert events[0]["perfect"] is False
    assert events[0]["variant"] == "design"
    assert events[0]["aspect_ratio"] == "1:1"
