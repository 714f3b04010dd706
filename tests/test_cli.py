from __future__ import annotations

import json
from pathlib import Path

import pytest

from studio_engine import cli
from studio_engine.errors import ValidationError
from studio_engine.options import AspectRatio, DecorStyle, LightingType, RoomType, Tone


@pytest.fixture(autouse=True)
def _offline_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY", "STUDIO_TEXT_MODEL", "STUDIO_IMAGE_MODEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STUDIO_PROVIDER", "dryrun")
    monkeypatch.setenv("STUDIO_GALLERY_PATH", str(tmp_path / "gallery.sqlite"))
    monkeypatch.delenv("STUDIO_GALLERY_MAX_BYTES", raising=False)


def test_design_request_from_template() -> None:
    args = cli._build_parser().parse_args(
        ["design", "--template", "cozy reading nook", "--out", "out", "--aspect", "1:1", "--aspect", "3:4"]
    )
    request = cli._design_request(args)
    assert request.subject.startswith("A cozy corner in a living room")
    assert request.options.room_type is RoomType.LIVING_ROOM
    assert request.options.decor_style is DecorStyle.SCANDINAVIAN
    assert request.options.lighting is LightingType.WARM_AMBIENT
    assert [variant.aspect_ratio for variant in request.variants] == [AspectRatio.SQUARE, AspectRatio.PORTRAIT]


def test_design_flags_override_template() -> None:
    args = cli._build_parser().parse_args(
        ["design", "my loft", "--template", "Cozy Reading Nook", "--style", "industrial", "--out", "out"]
    )
    request = cli._design_request(args)
    assert request.subject == "my loft"
    assert request.options.decor_style is DecorStyle.INDUSTRIAL
    assert [variant.key for variant in request.variants] == ["design"]


def test_social_request_platform_filter() -> None:
    args = cli._build_parser().parse_args(
        ["social", "launch day", "--tone", "witty", "--platform", "instagram", "--platform", "linkedin", "--out", "o"]
    )
    request = cli._social_request(args)
    assert request.options.tone is Tone.WITTY
    assert [variant.key for variant in request.variants] == ["linkedin", "instagram"]


def test_parse_comment() -> None:
    comment = cli._parse_comment("12.5, 40, Move the lamp, please")
    assert (comment.x, comment.y, comment.text) == (12.5, 40.0, "Move the lamp, please")
    with pytest.raises(ValidationError):
        cli._parse_comment("left,top,text")
    with pytest.raises(ValidationError):
        cli._parse_comment("10,20")


def test_design_dryrun_end_to_end(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = tmp_path / "run"
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["design", "a sunny breakfast nook", "--room", "kitchen", "--out", str(out_dir), "--save"])
    assert excinfo.value.code == 0

    assert (out_dir / "design.png").exists()
    assert (out_dir / "index.html").exists()
    events = [json.loads(line) for line in (out_dir / "events.jsonl").read_text(encoding="utf-8").splitlines()]
    assert events[0]["type"] == "request_started"
    assert events[-1]["type"] == "request_finished"
    saved_line = next(line for line in capsys.readouterr().out.splitlines() if line.startswith("Saved to gallery"))
    saved_id = saved_line.rsplit(" ", 1)[-1]
    assert saved_id.startswith("artifact-")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["gallery", "list"])
    assert excinfo.value.code == 0
    listing = capsys.readouterr().out
    assert saved_id in listing
    assert "design" in listing


def test_empty_subject_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["social", "   ", "--out", str(tmp_path / "run")])
    assert excinfo.value.code == 1
    assert "Please enter an idea." in capsys.readouterr().err


def test_unknown_provider_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", "--image", "x.png", "--question", "why?", "--out", str(tmp_path), "--provider", "nope"])
    assert excinfo.value.code == 1
    assert "Unknown provider" in capsys.readouterr().err


def test_templates_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["templates"])
    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Industrial-Style Kitchen" in out
    assert "Warm Ambient Lighting" in out
