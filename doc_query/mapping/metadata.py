"""Mapping metadata for domain types.

Resolves which collection a type lives in and how its attributes are named
in stored documents. Supports dataclasses, Pydantic models and plain
classes.

Conventions:
    - ``@document(collection="people")`` sets the collection explicitly;
      otherwise the class name with a lower-cased first letter is used.
    - An attribute named ``id`` is stored as ``_id``.
    - Dataclass fields may declare a stored name with
      ``field(metadata={"field": "stored_name"})``; Pydantic fields use
      ``Field(alias="stored_name")``.
    - A ``str``-typed id is stored as an ``ObjectId`` when it is a valid
      ObjectId hex string, and read back as its hex string.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from bson import ObjectId
from pydantic import BaseModel

from doc_query.core.preconditions import has_text

C = TypeVar("C", bound=type)

ID_FIELD = "_id"
ID_ATTRIBUTE = "id"

_LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})


def document(collection: str | None = None) -> Callable[[C], C]:
    """Class decorator declaring the collection a domain type is stored in."""
    if collection is not None:
        has_text(collection, "Collection name must not be empty")

    def decorate(cls: C) -> C:
        if collection is not None:
            cls.__collection__ = collection
        return cls

    return decorate


def collection_name_for(domain_type: type) -> str:
    """Return the collection name for ``domain_type``."""
    explicit = getattr(domain_type, "__collection__", None)
    if explicit:
        return str(explicit)
    name = domain_type.__name__
    return name[:1].lower() + name[1:]


@dataclass(frozen=True)
class EntityMetadata:
    """Resolved naming information for a single domain type."""

    target_class: type
    collection: str
    field_map: dict[str, str]  # attribute_name -> stored field name
    init_keys: dict[str, str]  # attribute_name -> constructor keyword
    required: frozenset[str]
    id_attribute: str | None
    id_is_str: bool = False

    def id_to_stored(self, value: Any) -> Any:
        """Convert an id value (or an id operator expression) to its stored form."""
        if not self.id_is_str:
            return value
        if isinstance(value, str):
            return ObjectId(value) if ObjectId.is_valid(value) else value
        if isinstance(value, list):
            return [self.id_to_stored(item) for item in value]
        if isinstance(value, Mapping):
            return {key: self.id_to_stored(item) for key, item in value.items()}
        return value

    def id_from_stored(self, value: Any) -> Any:
        if self.id_is_str and isinstance(value, ObjectId):
            return str(value)
        return value

    def stored_name(self, path: str) -> str:
        """Translate an attribute path (``a`` or ``a.b``) to its stored form."""
        head, sep, rest = path.partition(".")
        return self.field_map.get(head, head) + sep + rest

    def attribute_for(self, stored: str) -> str | None:
        """Return the attribute populated by ``stored``, or None if not declared."""
        for attribute, name in self.field_map.items():
            if name == stored:
                return attribute
        return None

    def query_to_stored(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Translate filter keys, descending into ``$and``/``$or``/``$nor``."""
        result: dict[str, Any] = {}
        for key, value in document.items():
            if key in _LOGICAL_OPERATORS and isinstance(value, list):
                result[key] = [self.query_to_stored(item) for item in value]
            elif key.startswith("$"):
                result[key] = value
            else:
                stored = self.stored_name(key)
                result[stored] = self.id_to_stored(value) if stored == ID_FIELD else value
        return result

    def fields_to_stored(self, fields: Mapping[str, int]) -> dict[str, int]:
        return {self.stored_name(key): value for key, value in fields.items()}

    def update_to_stored(self, document: Mapping[str, Mapping[str, Any]]) -> dict[str, Any]:
        """Translate the keys under each update operator."""
        return {
            operator: {self.stored_name(key): value for key, value in values.items()}
            for operator, values in document.items()
        }


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _type_hints(obj: Any) -> dict[str, Any]:
    # Unresolvable annotations leave the attribute untyped
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        return {}


def _is_str_type(annotation: Any) -> bool:
    """True for ``str`` and optional ``str`` annotations."""
    if annotation is str:
        return True
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        return [arg for arg in typing.get_args(annotation) if arg is not type(None)] == [str]
    return False


def _describe_fields(cls: type) -> list[tuple[str, str | None, bool, Any]]:
    """Return (attribute, declared stored name, required, annotation) for each attribute."""
    if _is_pydantic_model(cls):
        return [
            (name, info.alias, info.is_required(), info.annotation)
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
        ]

    if dataclasses.is_dataclass(cls):
        hints = _type_hints(cls)
        return [
            (
                f.name,
                f.metadata.get("field"),
                f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING,
                hints.get(f.name),
            )
            for f in dataclasses.fields(cls)
            if f.init
        ]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return []
    hints = _type_hints(cls.__init__)  # type: ignore[misc]
    return [
        (name, None, param.default is inspect.Parameter.empty, hints.get(name))
        for name, param in sig.parameters.items()
        if name != "self"
        and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


@lru_cache(maxsize=None)
def metadata_for(domain_type: type) -> EntityMetadata:
    """Resolve and cache the metadata of ``domain_type``."""
    is_pydantic = _is_pydantic_model(domain_type)
    field_map: dict[str, str] = {}
    init_keys: dict[str, str] = {}
    required: set[str] = set()
    id_attribute: str | None = None
    id_is_str = False

    for attribute, declared, is_required, annotation in _describe_fields(domain_type):
        stored = declared or (ID_FIELD if attribute == ID_ATTRIBUTE else attribute)
        field_map[attribute] = stored
        init_keys[attribute] = declared if (is_pydantic and declared) else attribute
        if is_required:
            required.add(attribute)
        if stored == ID_FIELD:
            id_attribute = attribute
            id_is_str = _is_str_type(annotation)

    return EntityMetadata(
        target_class=domain_type,
        collection=collection_name_for(domain_type),
        field_map=field_map,
        init_keys=init_keys,
        required=frozenset(required),
        id_attribute=id_attribute,
        id_is_str=id_is_str,
    )
