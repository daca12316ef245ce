"""Outcome descriptors for write operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of an update. ``upserted_id`` is set only if a document was inserted."""

    matched_count: int
    modified_count: int
    upserted_id: Any = None


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete."""

    deleted_count: int
