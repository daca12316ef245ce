"""Query and Update value objects.

Both are frozen dataclasses; every refining call returns a new instance.
Keys are attribute names of the domain type. The template translates them
to stored field names before anything reaches the driver.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from doc_query.core.enums import Direction
from doc_query.core.exceptions import InvalidArgumentError


def query(criteria: Mapping[str, Any] | None = None, **equals: Any) -> Query:
    """Build a Query from a criteria mapping and/or equality keywords.

    ``query()`` matches every document.

    Example:
        query(firstname="luke")
        query({"age": {"$gte": 18}}, active=True)
    """
    merged = dict(criteria or {})
    merged.update(equals)
    return Query(criteria=merged)


@dataclass(frozen=True)
class Query:
    """Filter, projection and cursor settings for a single operation."""

    criteria: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, int] = field(default_factory=dict)
    sort: tuple[tuple[str, Direction], ...] = ()
    skip: int = 0
    limit: int = 0

    def matching(self, criteria: Mapping[str, Any] | None = None, **equals: Any) -> Query:
        """Return a copy with additional criteria merged in."""
        merged = dict(self.criteria)
        merged.update(criteria or {})
        merged.update(equals)
        return replace(self, criteria=merged)

    def include(self, *names: str) -> Query:
        """Restrict returned fields to ``names`` (plus the id)."""
        fields = dict(self.fields)
        fields.update({name: 1 for name in names})
        return replace(self, fields=fields)

    def exclude(self, *names: str) -> Query:
        """Drop ``names`` from returned documents."""
        fields = dict(self.fields)
        fields.update({name: 0 for name in names})
        return replace(self, fields=fields)

    def order_by(self, name: str, direction: Direction = Direction.ASC) -> Query:
        return replace(self, sort=(*self.sort, (name, direction)))

    def skipping(self, count: int) -> Query:
        if count < 0:
            raise InvalidArgumentError(f"Skip must not be negative, got {count}")
        return replace(self, skip=count)

    def limited_to(self, count: int) -> Query:
        if count < 0:
            raise InvalidArgumentError(f"Limit must not be negative, got {count}")
        return replace(self, limit=count)

    def query_document(self) -> dict[str, Any]:
        return dict(self.criteria)

    def fields_document(self) -> dict[str, int]:
        return dict(self.fields)


@dataclass(frozen=True)
class Update:
    """A set of MongoDB update operators.

    Example:
        Update().set("firstname", "Han").inc("visits")
    """

    modifiers: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Update:
        """Wrap a raw update document such as ``{"$set": {"a": 1}}``."""
        modifiers = {}
        for operator, values in document.items():
            if not operator.startswith("$"):
                raise InvalidArgumentError(
                    f"Update documents must only contain operators, got '{operator}'"
                )
            modifiers[operator] = dict(values)
        return cls(modifiers=modifiers)

    def _with(self, operator: str, key: str, value: Any) -> Update:
        modifiers = {op: dict(values) for op, values in self.modifiers.items()}
        modifiers.setdefault(operator, {})[key] = value
        return Update(modifiers=modifiers)

    def set(self, key: str, value: Any) -> Update:
        return self._with("$set", key, value)

    def unset(self, key: str) -> Update:
        return self._with("$unset", key, 1)

    def inc(self, key: str, amount: int | float = 1) -> Update:
        return self._with("$inc", key, amount)

    def push(self, key: str, value: Any) -> Update:
        return self._with("$push", key, value)

    def set_on_insert(self, key: str, value: Any) -> Update:
        return self._with("$setOnInsert", key, value)

    def current_date(self, key: str) -> Update:
        return self._with("$currentDate", key, True)

    def to_document(self) -> dict[str, dict[str, Any]]:
        return {op: dict(values) for op, values in self.modifiers.items()}
