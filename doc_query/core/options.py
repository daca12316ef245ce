"""Option value objects passed from the builders to the template."""

from __future__ import annotations

from dataclasses import dataclass, replace

from doc_query.core.enums import Direction
from doc_query.core.query import Query


@dataclass(frozen=True)
class FindAndModifyOptions:
    """Behaviour of a find-and-modify call.

    Attributes:
        return_new: Return the document after the update instead of before.
        upsert: Insert a new document when nothing matches.
        remove: Delete the matched document instead of updating it.
    """

    return_new: bool = False
    upsert: bool = False
    remove: bool = False


@dataclass(frozen=True)
class CursorOptions:
    """Sort/skip/limit applied to a find cursor. A limit of 0 means none."""

    sort: tuple[tuple[str, Direction], ...] = ()
    skip: int = 0
    limit: int = 0

    @classmethod
    def from_query(cls, query: Query | None) -> CursorOptions:
        if query is None:
            return cls()
        return cls(sort=query.sort, skip=query.skip, limit=query.limit)

    def with_limit(self, limit: int) -> CursorOptions:
        return replace(self, limit=limit)
