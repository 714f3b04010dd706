from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from studio_engine.errors import StorageFailure, StorageFull
from studio_engine.gallery.store import GalleryStore
from studio_engine.options import AspectRatio
from studio_engine.schema import ArtifactVariant, GeneratedArtifactSet, GeneratedImage


def _artifact(text: str = "A calm rationale.", payload: bytes = b"png-bytes") -> GeneratedArtifactSet:
    return GeneratedArtifactSet(
        flow="social",
        text=text,
        variants=(
            ArtifactVariant("linkedin", "LinkedIn", AspectRatio.SQUARE, GeneratedImage(payload), "li copy"),
            ArtifactVariant("twitter", "Twitter/X", AspectRatio.WIDESCREEN, None, "tw copy", "No image was generated."),
        ),
        reference_style="muted tones",
    )


def test_save_list_roundtrip(tmp_path: Path) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite")
    store.init_db()
    assert store.list() == []

    items = store.save(_artifact(), (GeneratedImage(b"ref", "image/jpeg"),))
    assert len(items) == 1
    saved = items[0]
    assert saved.id.startswith("artifact-")
    assert saved.timestamp > 0
    assert saved.artifact == _artifact()
    assert saved.inspiration_images == (GeneratedImage(b"ref", "image/jpeg"),)
    assert store.get(saved.id) == saved
    assert store.get("artifact-missing") is None


def test_list_is_newest_first_and_delete(tmp_path: Path) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite")
    store.init_db()
    first = store.save(_artifact("first"))[0]
    second = store.save(_artifact("second"))[0]

    items = store.list()
    assert [item.id for item in items] == [second.id, first.id]

    remaining = store.delete(second.id)
    assert [item.id for item in remaining] == [first.id]
    assert store.delete("artifact-missing") == remaining


def test_add_returns_the_entry_it_stored(tmp_path: Path) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite")
    store.init_db()
    first = store.add(_artifact("first"))
    second = store.add(_artifact("second"), (GeneratedImage(b"ref"),))

    assert first.id != second.id
    assert store.get(second.id) == second
    assert store.get(first.id).artifact == _artifact("first")


def test_quota_raises_storage_full_and_keeps_gallery(tmp_path: Path) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite", max_bytes=100)
    store.init_db()
    store.save(_artifact("small", b"x" * 10))

    with pytest.raises(StorageFull):
        store.save(_artifact("big", b"x" * 200))
    assert [item.artifact.text for item in store.list()] == ["small"]
    assert isinstance(StorageFull("x"), StorageFailure)


def test_sqlite_errors_become_storage_failure(tmp_path: Path) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite")
    with pytest.raises(StorageFailure):
        store.list()


def test_disk_full_maps_to_storage_full(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = GalleryStore(tmp_path / "gallery.sqlite")
    store.init_db()

    class FullConnection:
        def __init__(self, conn: sqlite3.Connection) -> None:
            self._conn = conn

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def execute(self, *args, **kwargs):
            raise sqlite3.OperationalError("database or disk is full")

        def close(self) -> None:
            self._conn.close()

    real_connect = GalleryStore.connect
    monkeypatch.setattr(GalleryStore, "connect", lambda self: FullConnection(real_connect(self)))
    with pytest.raises(StorageFull):
        store.save(_artifact())
