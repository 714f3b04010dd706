from __future__ import annotations

import json
from pathlib import Path

from studio_engine.options import AspectRatio, DecorStyle, LightingType, RoomType
from studio_engine.runs.events import EventWriter
from studio_engine.schema import DesignOptions


def test_event_writer(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    writer = EventWriter(path, "run-123")
    writer.emit("request_started", flow="design")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["type"] == "request_started"
    assert payload["run_id"] == "run-123"
    assert "ts" in payload
    assert payload["flow"] == "design"


def test_event_payloads_never_carry_image_bytes(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "run-1")
    writer.emit(
        "variant_generated",
        image=b"\x89PNG" * 10,
        nested={"data": b"raw", "label": "ok"},
        raw=b"abc",
        aspect_ratio=AspectRatio.PORTRAIT,
        options=DesignOptions(RoomType.KITCHEN, DecorStyle.INDUSTRIAL, LightingType.DRAMATIC_ACCENT),
    )
    event = writer.read()[0]
    assert event["image"] == "<omitted>"
    assert event["nested"] == {"data": "<omitted>", "label": "ok"}
    assert event["raw"] == "<bytes:3>"
    assert event["aspect_ratio"] == "3:4"
    assert event["options"] == {
        "room_type": "Kitchen",
        "decor_style": "Industrial",
        "lighting": "Dramatic Accent Lighting",
    }


def test_events_append_in_order(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "run-1")
    for name in ("request_started", "text_generated", "request_finished"):
        writer.emit(name)
    assert [event["type"] for event in writer.read()] == ["request_started", "text_generated", "request_finished"]
