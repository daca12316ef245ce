"""Enumerations shared across DocQuery."""

from __future__ import annotations

from enum import Enum


class Direction(Enum):
    """Sort direction, valued as pymongo expects."""

    ASC = 1
    DESC = -1


class MappingEventType(Enum):
    """Lifecycle events published by the template."""

    BEFORE_SAVE = "before_save"
    AFTER_SAVE = "after_save"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"
    AFTER_LOAD = "after_load"
