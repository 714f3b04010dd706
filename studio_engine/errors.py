"""Typed failures surfaced by the studio engine."""

from __future__ import annotations


class StudioError(Exception):
    """Base class for every failure the engine surfaces to callers."""


class ValidationError(StudioError):
    """Caller input failed a precondition; nothing was sent to the service."""


class GenerationFailure(StudioError):
    """The generation service returned no usable result."""


class StorageFailure(StudioError):
    """The gallery store could not be read or written."""


class StorageFull(StorageFailure):
    """The gallery store is out of space (quota exceeded or disk full)."""
