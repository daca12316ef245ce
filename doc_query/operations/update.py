"""Fluent update operation.

``update(domain_type)`` only offers ``apply``; everything else becomes
available once an Update has been supplied.

Example:
    template.update(Person).apply(Update().set("firstname", "Han")).all_matching(query(id="id-1"))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Generic, TypeVar

from doc_query.core.options import FindAndModifyOptions
from doc_query.core.preconditions import has_text, not_none
from doc_query.core.query import Query, Update, query
from doc_query.core.results import UpdateResult

if TYPE_CHECKING:
    from doc_query.core.template import MongoTemplate

T = TypeVar("T")


@dataclass(frozen=True)
class UpdateOperation(Generic[T]):
    """First step of an update: choose the Update to apply."""

    template: MongoTemplate
    domain_type: type[T]
    collection: str | None = None

    def apply(self, update: Update) -> UpdateBuilder[T]:
        not_none(update, "Update must not be None")
        return UpdateBuilder(
            template=self.template,
            domain_type=self.domain_type,
            update=update,
            collection=self.collection,
        )


@dataclass(frozen=True)
class UpdateBuilder(Generic[T]):
    """Immutable update request with an Update applied."""

    template: MongoTemplate
    domain_type: type[T]
    update: Update
    collection: str | None = None
    options: FindAndModifyOptions | None = None

    def in_collection(self, collection: str) -> UpdateBuilder[T]:
        has_text(collection, "Collection must not be None nor empty")
        return replace(self, collection=collection)

    def with_options(self, options: FindAndModifyOptions) -> UpdateBuilder[T]:
        """Set the options used by ``find_and_modify_matching``."""
        not_none(options, "Options must not be None")
        return replace(self, options=options)

    def first(self) -> UpdateResult:
        """Update the first document in the collection."""
        return self._do_update(query(), multi=False, upsert=False)

    def first_matching(self, filter: Query) -> UpdateResult:  # noqa: A002
        not_none(filter, "Filter must not be None")
        return self._do_update(filter, multi=False, upsert=False)

    def all(self) -> UpdateResult:
        """Update every document in the collection."""
        return self._do_update(query(), multi=True, upsert=False)

    def all_matching(self, filter: Query) -> UpdateResult:  # noqa: A002
        not_none(filter, "Filter must not be None")
        return self._do_update(filter, multi=True, upsert=False)

    def upsert_if_none_matching(self, filter: Query) -> UpdateResult:  # noqa: A002
        """Update all matches, or insert a new document if there are none."""
        not_none(filter, "Filter must not be None")
        return self._do_update(filter, multi=True, upsert=True)

    def find_and_modify_matching(self, filter: Query) -> T | None:  # noqa: A002
        """Update the first match and return it, before or after the change."""
        not_none(filter, "Filter must not be None")
        return self.template.find_and_modify(
            filter,
            self.update,
            self.options,
            self.domain_type,
            self._collection_name(),
        )

    def _collection_name(self) -> str:
        return self.collection or self.template.determine_collection_name(self.domain_type)

    def _do_update(self, filter: Query, multi: bool, upsert: bool) -> UpdateResult:  # noqa: A002
        return self.template.do_update(
            self._collection_name(),
            filter,
            self.update,
            self.domain_type,
            upsert,
            multi,
        )
