"""SQLite-backed gallery of saved artifact sets."""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..config import DEFAULT_GALLERY_PATH
from ..errors import StorageFailure, StorageFull
from ..options import AspectRatio
from ..schema import ArtifactVariant, GeneratedArtifactSet, GeneratedImage, SavedArtifact
from ..utils import ensure_dir, now_ms


@dataclass
class GalleryStore:
    """Saved artifacts, newest first.

    ``max_bytes`` caps the stored image and text payload; a save that would
    exceed it raises ``StorageFull`` and leaves the gallery unchanged.
    """

    path: Path = DEFAULT_GALLERY_PATH
    max_bytes: int | None = None

    def connect(self) -> sqlite3.Connection:
        ensure_dir(self.path.parent)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self.connect()
        except (OSError, sqlite3.Error) as exc:
            raise StorageFailure(f"Could not open gallery at {self.path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            if _is_disk_full(exc):
                raise StorageFull("Storage is full. Delete some saved items and try again.") from exc
            raise StorageFailure(f"Gallery operation failed: {exc}") from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        with self._session() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS artifacts (
                    id TEXT PRIMARY KEY,
                    timestamp INTEGER NOT NULL,
                    flow TEXT NOT NULL,
                    text TEXT NOT NULL,
                    reference_style TEXT
                );
                CREATE TABLE IF NOT EXISTS variants (
                    artifact_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    key TEXT NOT NULL,
                    label TEXT NOT NULL,
                    aspect_ratio TEXT NOT NULL,
                    content TEXT,
                    error TEXT,
                    mime_type TEXT,
                    image BLOB,
                    PRIMARY KEY (artifact_id, position)
                );
                CREATE TABLE IF NOT EXISTS inspirations (
                    artifact_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    mime_type TEXT NOT NULL,
                    image BLOB NOT NULL,
                    PRIMARY KEY (artifact_id, position)
                );
                """
            )

    def list(self) -> list[SavedArtifact]:
        with self._session() as conn:
            rows = conn.execute("SELECT * FROM artifacts ORDER BY timestamp DESC, rowid DESC").fetchall()
            return [self._load(conn, row) for row in rows]

    def get(self, artifact_id: str) -> SavedArtifact | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM artifacts WHERE id = ?", (artifact_id,)).fetchone()
            return self._load(conn, row) if row else None

    def save(
        self,
        artifact: GeneratedArtifactSet,
        inspiration_images: tuple[GeneratedImage, ...] = (),
    ) -> list[SavedArtifact]:
        self.add(artifact, inspiration_images)
        return self.list()

    def add(
        self,
        artifact: GeneratedArtifactSet,
        inspiration_images: tuple[GeneratedImage, ...] = (),
    ) -> SavedArtifact:
        """Store one artifact set and return the saved entry."""
        artifact_id = f"artifact-{now_ms()}-{uuid.uuid4().hex[:8]}"
        timestamp = now_ms()
        with self._session() as conn:
            if self.max_bytes is not None:
                needed = _payload_size(artifact, inspiration_images)
                used = self._used_bytes(conn)
                if used + needed > self.max_bytes:
                    raise StorageFull(
                        f"Storage is full ({used + needed} of {self.max_bytes} bytes). "
                        "Delete some saved items and try again."
                    )
            conn.execute(
                "INSERT INTO artifacts (id, timestamp, flow, text, reference_style) VALUES (?, ?, ?, ?, ?)",
                (artifact_id, timestamp, artifact.flow, artifact.text, artifact.reference_style),
            )
            conn.executemany(
                """
                INSERT INTO variants
                (artifact_id, position, key, label, aspect_ratio, content, error, mime_type, image)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        artifact_id,
                        position,
                        variant.key,
                        variant.label,
                        variant.aspect_ratio.value,
                        variant.content,
                        variant.error,
                        variant.image.mime_type if variant.image else None,
                        variant.image.data if variant.image else None,
                    )
                    for position, variant in enumerate(artifact.variants)
                ],
            )
            conn.executemany(
                "INSERT INTO inspirations (artifact_id, position, mime_type, image) VALUES (?, ?, ?, ?)",
                [
                    (artifact_id, position, image.mime_type, image.data)
                    for position, image in enumerate(inspiration_images)
                ],
            )
        return SavedArtifact(artifact_id, timestamp, artifact, tuple(inspiration_images))

    def delete(self, artifact_id: str) -> list[SavedArtifact]:
        with self._session() as conn:
            conn.execute("DELETE FROM variants WHERE artifact_id = ?", (artifact_id,))
            conn.execute("DELETE FROM inspirations WHERE artifact_id = ?", (artifact_id,))
            conn.execute("DELETE FROM artifacts WHERE id = ?", (artifact_id,))
        return self.list()

    def _used_bytes(self, conn: sqlite3.Connection) -> int:
        row = conn.execute(
            """
            SELECT
                (SELECT COALESCE(SUM(LENGTH(CAST(text AS BLOB))), 0) FROM artifacts)
              + (SELECT COALESCE(SUM(LENGTH(image)), 0) FROM variants)
              + (SELECT COALESCE(SUM(LENGTH(image)), 0) FROM inspirations)
            """
        ).fetchone()
        return int(row[0] or 0)

    def _load(self, conn: sqlite3.Connection, row: sqlite3.Row) -> SavedArtifact:
        variant_rows = conn.execute(
            "SELECT * FROM variants WHERE artifact_id = ? ORDER BY position", (row["id"],)
        ).fetchall()
        inspiration_rows = conn.execute(
            "SELECT * FROM inspirations WHERE artifact_id = ? ORDER BY position", (row["id"],)
        ).fetchall()
        variants = tuple(
            ArtifactVariant(
                key=item["key"],
                label=item["label"],
                aspect_ratio=AspectRatio(item["aspect_ratio"]),
                image=(
                    GeneratedImage(data=bytes(item["image"]), mime_type=item["mime_type"] or "image/png")
                    if item["image"] is not None
                    else None
                ),
                content=item["content"],
                error=item["error"],
            )
            for item in variant_rows
        )
        return SavedArtifact(
            id=row["id"],
            timestamp=int(row["timestamp"]),
            artifact=GeneratedArtifactSet(
                flow=row["flow"],
                text=row["text"],
                variants=variants,
                reference_style=row["reference_style"],
            ),
            inspiration_images=tuple(
                GeneratedImage(data=bytes(item["image"]), mime_type=item["mime_type"]) for item in inspiration_rows
            ),
        )


def _payload_size(artifact: GeneratedArtifactSet, inspiration_images: tuple[GeneratedImage, ...]) -> int:
    size = len(artifact.text.encode("utf-8"))
    size += sum(len(variant.image.data) for variant in artifact.variants if variant.image)
    size += sum(len(image.data) for image in inspiration_images)
    return size


def _is_disk_full(exc: sqlite3.Error) -> bool:
    if getattr(exc, "sqlite_errorcode", None) == sqlite3.SQLITE_FULL:
        return True
    return "database or disk is full" in str(exc).lower()
