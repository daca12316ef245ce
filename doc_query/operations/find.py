"""Fluent find operation.

Example:
    template.query(Person).in_collection("star-wars").return_results_as(Jedi).find_all()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from doc_query.core.exceptions import IncorrectResultSizeError
from doc_query.core.options import CursorOptions
from doc_query.core.preconditions import has_text, not_none
from doc_query.core.query import Query

if TYPE_CHECKING:
    from doc_query.core.template import MongoTemplate

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class FindOperation(Generic[T]):
    """Immutable find request. Every step returns a new operation."""

    template: MongoTemplate
    domain_type: type
    result_type: type[T]
    collection: str | None = None

    def in_collection(self, collection: str) -> FindOperation[T]:
        """Read from ``collection`` instead of the domain type's own collection."""
        has_text(collection, "Collection name must not be None nor empty")
        return replace(self, collection=collection)

    def return_results_as(self, result_type: type[R]) -> FindOperation[R]:
        """Map results into ``result_type`` instead of the domain type."""
        not_none(result_type, "Result type must not be None")
        return replace(self, result_type=result_type)  # type: ignore[return-value]

    def find_all_by(self, query: Query | None = None) -> list[T]:
        """Return every match. A missing query matches everything."""
        return self._do_find(query, CursorOptions.from_query(query))

    def find_by(self, query: Query | None = None) -> T | None:
        """Return the single match, or None.

        Raises:
            IncorrectResultSizeError: If more than one document matches.
        """
        result = self._do_find(query, CursorOptions.from_query(query).with_limit(2))
        if not result:
            return None
        if len(result) > 1:
            raise IncorrectResultSizeError(
                f"Query {self._describe(query)} returned non unique result.",
                expected_size=1,
                actual_size=len(result),
            )
        return result[0]

    def find_first_by(self, query: Query | None = None) -> T | None:
        """Return the first match, or None. No uniqueness check."""
        result = self._do_find(query, CursorOptions.from_query(query).with_limit(1))
        return result[0] if result else None

    def find_all(self) -> list[T]:
        return self.find_all_by(None)

    def _do_find(self, query: Query | None, cursor_options: CursorOptions) -> list[T]:
        query_document: dict[str, Any] = query.query_document() if query is not None else {}
        fields_document: dict[str, Any] = query.fields_document() if query is not None else {}
        return self.template.do_find(
            self.collection or self.template.determine_collection_name(self.domain_type),
            query_document,
            fields_document,
            self.domain_type,
            self.result_type,
            cursor_options,
        )

    @staticmethod
    def _describe(query: Query | None) -> str:
        return str(query.query_document()) if query is not None else "{}"
