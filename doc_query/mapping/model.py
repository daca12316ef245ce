"""Document-to-model mapper.

Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from doc_query.core.exceptions import FieldMismatchError, FieldTypeError
from doc_query.mapping.metadata import ID_FIELD, EntityMetadata, metadata_for

T = TypeVar("T")


class DocumentMapper(Generic[T]):
    """Maps stored documents to instances of ``target_class`` and back.

    Reading translates stored field names to attribute names and drops any
    key the target class does not declare, so a class with fewer attributes
    than the stored document works as a projection.

    Construction:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass / plain class -> target_class(**values)

    Args:
        target_class: The class to construct from documents.
    """

    def __init__(self, target_class: type[T]) -> None:
        self._target_class = target_class
        self._metadata: EntityMetadata = metadata_for(target_class)
        self._is_pydantic = issubclass(target_class, BaseModel)

    @property
    def metadata(self) -> EntityMetadata:
        return self._metadata

    def _attribute_values(self, document: dict[str, Any]) -> dict[str, Any]:
        values = {}
        for stored, value in document.items():
            attribute = self._metadata.attribute_for(stored)
            if attribute is None:
                continue
            if attribute == self._metadata.id_attribute:
                value = self._metadata.id_from_stored(value)
            values[attribute] = value
        return values

    def read(self, document: dict[str, Any]) -> T:
        """Map a single stored document to a target_class instance."""
        values = self._attribute_values(document)

        missing = sorted(self._metadata.required - values.keys())
        if missing:
            raise FieldMismatchError(self._target_class.__name__, missing)

        kwargs = {self._metadata.init_keys[name]: value for name, value in values.items()}

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(  # type: ignore[attr-defined, no-any-return]
                    kwargs
                )
            except ValidationError as e:
                raise FieldTypeError(
                    self._target_class.__name__,
                    [
                        f"{'.'.join(str(part) for part in err['loc'])} ({err['type']})"
                        for err in e.errors()
                    ],
                ) from e

        try:
            return self._target_class(**kwargs)
        except TypeError as e:
            raise FieldMismatchError(self._target_class.__name__, [str(e)]) from e

    def map_many(self, documents: list[dict[str, Any]]) -> list[T]:
        """Map all documents via read."""
        return [self.read(document) for document in documents]

    def write(self, entity: T) -> dict[str, Any]:
        """Map ``entity`` to a stored document.

        A None id is left out so the server assigns one. A str id holding an
        ObjectId hex string is stored as that ObjectId.
        """
        if isinstance(entity, BaseModel):
            values = entity.model_dump()
        elif dataclasses.is_dataclass(entity):
            values = dataclasses.asdict(entity)  # type: ignore[arg-type]
        else:
            values = {
                name: getattr(entity, name)
                for name in self._metadata.field_map
                if hasattr(entity, name)
            }

        document = {self._metadata.stored_name(name): value for name, value in values.items()}
        if ID_FIELD in document:
            if document[ID_FIELD] is None:
                del document[ID_FIELD]
            else:
                document[ID_FIELD] = self._metadata.id_to_stored(document[ID_FIELD])
        return document

    def id_of(self, entity: T) -> Any:
        """Return the id attribute of ``entity``, or None if it has none."""
        if self._metadata.id_attribute is None:
            return None
        return getattr(entity, self._metadata.id_attribute, None)
