"""Repository base class.

Thin wrapper over MongoTemplate for DDD-oriented usage.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from doc_query.core.preconditions import has_text, not_none
from doc_query.core.query import query
from doc_query.core.results import DeleteResult
from doc_query.core.template import MongoTemplate
from doc_query.operations.find import FindOperation
from doc_query.operations.remove import RemoveOperation
from doc_query.operations.update import UpdateOperation

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository bound to one domain type and collection.

    Subclasses define concrete finders on top of the scoped builders.

    Example:
        class PersonRepository(Repository[Person]):
            def by_firstname(self, name: str) -> list[Person]:
                return self.query().find_all_by(query(firstname=name))
    """

    def __init__(
        self,
        template: MongoTemplate,
        domain_type: type[T],
        collection: str | None = None,
    ) -> None:
        self.template = not_none(template, "Template must not be None")
        self.domain_type = not_none(domain_type, "Domain type must not be None")
        if collection is not None:
            has_text(collection, "Collection must not be empty")
        self.collection = collection or template.determine_collection_name(domain_type)

    def query(self) -> FindOperation[T]:
        return self.template.query(self.domain_type).in_collection(self.collection)

    def update(self) -> UpdateOperation[T]:
        return UpdateOperation(
            template=self.template,
            domain_type=self.domain_type,
            collection=self.collection,
        )

    def remove(self) -> RemoveOperation[T]:
        return self.template.remove(self.domain_type).in_collection(self.collection)

    def find_all(self) -> list[T]:
        return self.query().find_all()

    def find_by_id(self, id: Any) -> T | None:  # noqa: A002
        return self.template.find_by_id(id, self.domain_type, self.collection)

    def save(self, entity: T) -> T:
        return self.template.save(entity, self.collection)

    def count(self) -> int:
        return self.template.count(query(), self.domain_type, self.collection)

    def delete(self, entity: T) -> DeleteResult:
        return self.template.remove_entity(entity, self.collection)

