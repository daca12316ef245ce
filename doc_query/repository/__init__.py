"""Repository layer - DDD repository pattern."""

from __future__ import annotations

from doc_query.repository.base import Repository

__all__ = [
    "Repository",
]
