"""Operation layer - fluent find, update and remove builders."""

from __future__ import annotations

from doc_query.operations.find import FindOperation
from doc_query.operations.remove import RemoveOperation
from doc_query.operations.update import UpdateBuilder, UpdateOperation

__all__ = [
    "FindOperation",
    "UpdateOperation",
    "UpdateBuilder",
    "RemoveOperation",
]
