"""Shared utilities for the studio engine."""

from __future__ import annotations

import json
import os
import time
import tomllib
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

# Payload keys whose values may hold raw image bytes.
_OMITTED_KEYS = frozenset({"image", "image_bytes", "data", "inline_data", "overlay"})


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def serialize(value: Any) -> Any:
    """Convert enums, dataclasses and paths into JSON-ready values."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}>"
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: serialize(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Mapping):
        return {str(key): serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize(item) for item in value]
    return str(value)


def sanitize_payload(payload: Any) -> Any:
    """Serialize an event payload, replacing image-bearing fields with a marker."""
    value = serialize(payload)
    if isinstance(value, dict):
        return {
            key: "<omitted>" if key.lower() in _OMITTED_KEYS else sanitize_payload(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [sanitize_payload(item) for item in value]
    return value


def truncate(text: str, limit: int = 160) -> str:
    collapsed = " ".join(str(text or "").split())
    if len(collapsed) > limit:
        return collapsed[: max(0, limit - 3)].rstrip() + "..."
    return collapsed


def write_json(path: Path, payload: Any) -> None:
    ensure_dir(path.parent)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def getenv_int(key: str, default: int | None = None) -> int | None:
    raw = (os.getenv(key) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def getenv_float(key: str, default: float | None = None) -> float | None:
    raw = (os.getenv(key) or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def load_dotenv(path: Path | None = None, override: bool = False) -> bool:
    """Load KEY=VALUE pairs from a .env file into the process environment."""
    env_path = path or _default_env_path()
    if not env_path.is_file():
        return False
    for line in env_path.read_text(encoding="utf-8").splitlines():
        parsed = _parse_env_line(line)
        if parsed is None:
            continue
        key, value = parsed
        if override or key not in os.environ:
            os.environ[key] = value
    return True


def _parse_env_line(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if stripped.startswith("export "):
        stripped = stripped[len("export ") :].lstrip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    key, _, value = stripped.partition("=")
    key = key.strip()
    if not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        value = value[1:-1]
    return key, value


def _default_env_path() -> Path:
    cwd = Path.cwd()
    root = _find_repo_root(cwd)
    if root is not None and (root / ".env").is_file():
        return root / ".env"
    return cwd / ".env"


def _find_repo_root(start: Path) -> Path | None:
    for candidate in (start, *start.parents):
        if (candidate / "studio_engine").is_dir():
            return candidate
        pyproject = candidate / "pyproject.toml"
        if pyproject.is_file() and _project_name(pyproject) == "studio":
            return candidate
    return None


def _project_name(pyproject: Path) -> str | None:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("name")
