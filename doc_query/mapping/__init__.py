"""Mapping layer - transform stored documents into typed objects."""

from __future__ import annotations

from doc_query.mapping.metadata import (
    EntityMetadata,
    collection_name_for,
    document,
    metadata_for,
)
from doc_query.mapping.model import DocumentMapper

__all__ = [
    "DocumentMapper",
    "EntityMetadata",
    "collection_name_for",
    "document",
    "metadata_for",
]
