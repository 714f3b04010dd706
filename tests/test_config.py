from __future__ import annotations

from pathlib import Path

import pytest

from studio_engine.config import StudioConfig, resolve_api_key
from studio_engine.models.registry import ModelRegistry
from studio_engine.models.selectors import ModelSelector
from studio_engine.options import ImageQuality

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "API_KEY",
    "STUDIO_PROVIDER",
    "STUDIO_TEXT_MODEL",
    "STUDIO_ANALYSIS_MODEL",
    "STUDIO_EDIT_MODEL",
    "STUDIO_IMAGE_MODEL",
    "STUDIO_CRITIQUE_THINKING_BUDGET",
    "STUDIO_REQUEST_TIMEOUT_S",
    "STUDIO_GALLERY_PATH",
    "STUDIO_GALLERY_MAX_BYTES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = StudioConfig.from_env()
    assert config.api_key is None
    assert config.provider == "gemini"
    assert config.text_model == "gemini-2.5-flash"
    assert config.analysis_model == "gemini-2.5-pro"
    assert config.edit_model == "gemini-2.5-flash-image"
    assert config.critique_thinking_budget == 32768
    assert config.request_timeout_s is None
    assert config.gallery_max_bytes is None
    assert config.fallbacks == ()


def test_api_key_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "third")
    assert resolve_api_key() == "third"
    monkeypatch.setenv("GOOGLE_API_KEY", "second")
    assert resolve_api_key() == "second"
    monkeypatch.setenv("GEMINI_API_KEY", "first")
    assert resolve_api_key() == "first"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STUDIO_PROVIDER", "DryRun")
    monkeypatch.setenv("STUDIO_ANALYSIS_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("STUDIO_CRITIQUE_THINKING_BUDGET", "0")
    monkeypatch.setenv("STUDIO_REQUEST_TIMEOUT_S", "12.5")
    monkeypatch.setenv("STUDIO_GALLERY_PATH", str(tmp_path / "g.sqlite"))
    monkeypatch.setenv("STUDIO_GALLERY_MAX_BYTES", "5000000")
    config = StudioConfig.from_env()
    assert config.provider == "dryrun"
    assert config.analysis_model == "gemini-2.5-flash"
    assert config.critique_thinking_budget == 0
    assert config.request_timeout_s == 12.5
    assert config.gallery_path == tmp_path / "g.sqlite"
    assert config.gallery_max_bytes == 5000000


def test_unknown_model_falls_back_with_reason(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STUDIO_TEXT_MODEL", "not-a-model")
    monkeypatch.setenv("STUDIO_EDIT_MODEL", "gemini-2.5-pro")
    config = StudioConfig.from_env()
    assert config.text_model == "gemini-2.5-flash"
    assert config.edit_model == "gemini-2.5-flash-image"
    assert len(config.fallbacks) == 2


def test_image_model_for_quality_tiers(monkeypatch: pytest.MonkeyPatch) -> None:
    config = StudioConfig.from_env()
    assert config.image_model_for(ImageQuality.ULTRA) == "imagen-4.0-ultra-generate-001"
    assert config.image_model_for(ImageQuality.BALANCED) == "imagen-4.0-generate-001"
    assert config.image_model_for(ImageQuality.FASTEST) == "imagen-4.0-fast-generate-001"

    monkeypatch.setenv("STUDIO_IMAGE_MODEL", "imagen-4.0-fast-generate-001")
    pinned = StudioConfig.from_env()
    assert pinned.image_model_for(ImageQuality.ULTRA) == "imagen-4.0-fast-generate-001"


def test_model_selector_requires_capability() -> None:
    selector = ModelSelector(ModelRegistry(), provider="gemini")
    selection = selector.select("gemini-2.5-flash-image", "edit")
    assert selection.model.name == "gemini-2.5-flash-image"
    assert selection.fallback_reason is None
    with pytest.raises(RuntimeError):
        ModelSelector(ModelRegistry({}), provider="gemini").select(None, "text")
