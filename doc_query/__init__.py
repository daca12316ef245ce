"""DocQuery - fluent find, update and remove operations for MongoDB."""

from __future__ import annotations

from doc_query.core.connection import ConnectionConfig, ConnectionManager
from doc_query.core.enums import Direction, MappingEventType
from doc_query.core.events import MappingEvent
from doc_query.core.exceptions import (
    DocQueryError,
    ExecutionError,
    FieldMismatchError,
    FieldTypeError,
    IncorrectResultSizeError,
    InvalidArgumentError,
    MappingError,
)
from doc_query.core.options import CursorOptions, FindAndModifyOptions
from doc_query.core.query import Query, Update, query
from doc_query.core.results import DeleteResult, UpdateResult
from doc_query.core.template import MongoTemplate
from doc_query.mapping.metadata import document
from doc_query.mapping.model import DocumentMapper
from doc_query.repository.base import Repository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Template
    "MongoTemplate",
    # Query
    "Query",
    "Update",
    "query",
    # Options
    "FindAndModifyOptions",
    "CursorOptions",
    # Results
    "UpdateResult",
    "DeleteResult",
    # Mapping
    "DocumentMapper",
    "document",
    # Events
    "MappingEvent",
    # Repository
    "Repository",
    # Enums
    "Direction",
    "MappingEventType",
    # Exceptions
    "DocQueryError",
    "InvalidArgumentError",
    "ExecutionError",
    "IncorrectResultSizeError",
    "MappingError",
    "FieldMismatchError",
    "FieldTypeError",
]
