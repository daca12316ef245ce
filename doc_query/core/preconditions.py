"""Argument checks shared by the operation builders and the template."""

from __future__ import annotations

from typing import Any, TypeVar

from doc_query.core.exceptions import InvalidArgumentError

V = TypeVar("V")


def not_none(value: V | None, message: str) -> V:
    """Return ``value`` or raise InvalidArgumentError if it is None."""
    if value is None:
        raise InvalidArgumentError(message)
    return value


def has_text(value: Any, message: str) -> str:
    """Return ``value`` if it is a non-blank string, else raise."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message)
    return value
