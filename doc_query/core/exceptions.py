"""DocQuery exception hierarchy.

Only errors owned by this library live here. Driver exceptions raised by
pymongo while talking to the server are propagated unchanged.
"""

from __future__ import annotations


class DocQueryError(Exception):
    """Base exception for all DocQuery errors."""


# --- Arguments ---


class InvalidArgumentError(DocQueryError, ValueError):
    """Raised when a caller-supplied argument violates a precondition.

    Always raised before anything is sent to the database.
    """


# --- Execution ---


class ExecutionError(DocQueryError):
    """Base for operation execution errors."""


class IncorrectResultSizeError(ExecutionError):
    """Raised when a query returns more results than the caller allows."""

    def __init__(self, message: str, expected_size: int, actual_size: int | None = None) -> None:
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__(message)


# --- Mapping ---


class MappingError(DocQueryError):
    """Base for mapping errors."""


class FieldMismatchError(MappingError):
    """Raised when required attributes cannot be populated from a document."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


class FieldTypeError(MappingError):
    """Raised when document values fail validation against the target class."""

    def __init__(self, target_class: str, invalid_fields: list[str]) -> None:
        self.target_class = target_class
        self.invalid_fields = invalid_fields
        super().__init__(f"Cannot map to {target_class}: invalid fields {invalid_fields}")
