"""Fluent remove operation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Generic, TypeVar

from doc_query.core.preconditions import has_text, not_none
from doc_query.core.query import Query, query
from doc_query.core.results import DeleteResult

if TYPE_CHECKING:
    from doc_query.core.template import MongoTemplate

T = TypeVar("T")


@dataclass(frozen=True)
class RemoveOperation(Generic[T]):
    """Immutable remove request."""

    template: MongoTemplate
    domain_type: type[T]
    collection: str | None = None

    def in_collection(self, collection: str) -> RemoveOperation[T]:
        has_text(collection, "Collection must not be None nor empty")
        return replace(self, collection=collection)

    def all(self) -> DeleteResult:
        """Remove every document. The collection itself is kept."""
        return self.all_matching(query())

    def all_matching(self, filter: Query) -> DeleteResult:  # noqa: A002
        not_none(filter, "Filter must not be None")
        return self.template.do_remove(self._collection_name(), filter, self.domain_type)

    def and_return_all_matching(self, filter: Query) -> list[T]:  # noqa: A002
        """Remove every match and return what was removed.

        Matches are read first and then deleted one at a time, each with its
        own delete events. The sequence is not atomic.
        """
        not_none(filter, "Filter must not be None")
        return self.template.do_find_and_delete(self._collection_name(), filter, self.domain_type)

    def _collection_name(self) -> str:
        return self.collection or self.template.determine_collection_name(self.domain_type)
