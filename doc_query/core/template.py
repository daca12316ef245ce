"""Document operations template.

MongoTemplate maps domain types to collections and documents, executes
operations through pymongo, and publishes lifecycle events. The fluent
builders returned by ``query``, ``update`` and ``remove`` assemble a request
and hand it to the ``do_*`` methods here.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.cursor import Cursor
from pymongo.database import Database

from doc_query.core.connection import ConnectionConfig, ConnectionManager
from doc_query.core.enums import Direction, MappingEventType
from doc_query.core.events import EventPublisher, Listener, MappingEvent
from doc_query.core.options import CursorOptions, FindAndModifyOptions
from doc_query.core.preconditions import has_text, not_none
from doc_query.core.query import Query, Update
from doc_query.core.results import DeleteResult, UpdateResult
from doc_query.mapping.metadata import ID_FIELD, EntityMetadata, metadata_for
from doc_query.mapping.model import DocumentMapper
from doc_query.operations.find import FindOperation
from doc_query.operations.remove import RemoveOperation
from doc_query.operations.update import UpdateOperation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _sort_spec(
    metadata: EntityMetadata, sort: tuple[tuple[str, Direction], ...]
) -> list[tuple[str, int]]:
    return [(metadata.stored_name(name), direction.value) for name, direction in sort]


class MongoTemplate:
    """Synchronous document operations over a pymongo Database."""

    def __init__(
        self,
        database: Database,
        connection_manager: ConnectionManager | None = None,
    ) -> None:
        self._database = database
        self._connection_manager = connection_manager
        self._events = EventPublisher()
        self._mappers: dict[type, DocumentMapper[Any]] = {}

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> MongoTemplate:
        """Create a MongoTemplate from a ConnectionConfig.

        The template owns the client and closes it in ``close()``.
        """
        connection_manager = ConnectionManager(config)
        return cls(connection_manager.get_database(), connection_manager)

    @property
    def database(self) -> Database:
        return self._database

    def close(self) -> None:
        """Close the client if this template created it."""
        if self._connection_manager is not None:
            self._connection_manager.close()

    # --- Fluent entry points ---

    def query(self, domain_type: type[T]) -> FindOperation[T]:
        """Start a find operation for ``domain_type``."""
        not_none(domain_type, "Domain type must not be None")
        return FindOperation(template=self, domain_type=domain_type, result_type=domain_type)

    def update(self, domain_type: type[T]) -> UpdateOperation[T]:
        """Start an update operation for ``domain_type``."""
        not_none(domain_type, "Domain type must not be None")
        return UpdateOperation(template=self, domain_type=domain_type)

    def remove(self, domain_type: type[T]) -> RemoveOperation[T]:
        """Start a remove operation for ``domain_type``."""
        not_none(domain_type, "Domain type must not be None")
        return RemoveOperation(template=self, domain_type=domain_type)

    # --- Events ---

    def add_listener(self, listener: Listener, *types: MappingEventType) -> None:
        """Register ``listener`` for ``types``, or for every event if none given."""
        self._events.add_listener(listener, *types)

    def remove_listener(self, listener: Listener) -> None:
        self._events.remove_listener(listener)

    def _publish(
        self,
        event_type: MappingEventType,
        domain_type: type,
        collection_name: str,
        source: Any,
    ) -> None:
        self._events.publish(MappingEvent(event_type, domain_type, collection_name, source))

    # --- Mapping ---

    def determine_collection_name(self, domain_type: type) -> str:
        """Return the collection ``domain_type`` is stored in."""
        not_none(domain_type, "Domain type must not be None")
        return metadata_for(domain_type).collection

    def _mapper(self, target_class: type[T]) -> DocumentMapper[T]:
        mapper = self._mappers.get(target_class)
        if mapper is None:
            mapper = DocumentMapper(target_class)
            self._mappers[target_class] = mapper
        return mapper

    def _read(
        self,
        result_type: type[T],
        document: dict[str, Any],
        domain_type: type,
        collection_name: str,
    ) -> T:
        self._publish(MappingEventType.AFTER_LOAD, domain_type, collection_name, document)
        # dict results are the raw stored documents
        if result_type is dict:
            return dict(document)  # type: ignore[return-value]
        return self._mapper(result_type).read(document)

    def get_collection(self, collection_name: str) -> Collection:
        has_text(collection_name, "Collection name must not be None nor empty")
        return self._database[collection_name]

    def _resolve(self, domain_type: type, collection_name: str | None) -> str:
        return collection_name or self.determine_collection_name(domain_type)

    @staticmethod
    def _prepare(
        cursor: Cursor, metadata: EntityMetadata, options: CursorOptions | None
    ) -> Cursor:
        if options is None:
            return cursor
        if options.sort:
            cursor = cursor.sort(_sort_spec(metadata, options.sort))
        if options.skip:
            cursor = cursor.skip(options.skip)
        if options.limit:
            cursor = cursor.limit(options.limit)
        return cursor

    # --- Operations used by the builders ---

    def do_find(
        self,
        collection_name: str,
        query_document: dict[str, Any],
        fields_document: dict[str, Any],
        domain_type: type,
        result_type: type[T],
        cursor_options: CursorOptions | None = None,
    ) -> list[T]:
        """Find documents and map them to ``result_type``.

        Keys in ``query_document`` and ``fields_document`` are attribute names
        of ``domain_type``.
        """
        metadata = metadata_for(domain_type)
        mapped_query = metadata.query_to_stored(query_document)
        mapped_fields = metadata.fields_to_stored(fields_document)
        logger.debug(
            "find using query: %s fields: %s for class: %s in collection: %s",
            mapped_query,
            mapped_fields,
            domain_type.__name__,
            collection_name,
        )

        collection = self.get_collection(collection_name)
        cursor = collection.find(mapped_query, projection=mapped_fields or None)
        documents = list(self._prepare(cursor, metadata, cursor_options))
        return [
            self._read(result_type, document, domain_type, collection_name)
            for document in documents
        ]

    def do_update(
        self,
        collection_name: str,
        query: Query,
        update: Update,
        domain_type: type,
        upsert: bool,
        multi: bool,
    ) -> UpdateResult:
        """Apply ``update`` to the first (or every, if ``multi``) match."""
        metadata = metadata_for(domain_type)
        mapped_query = metadata.query_to_stored(query.query_document())
        mapped_update = metadata.update_to_stored(update.to_document())
        logger.debug(
            "Calling update using query: %s and update: %s in collection: %s "
            "(upsert=%s, multi=%s)",
            mapped_query,
            mapped_update,
            collection_name,
            upsert,
            multi,
        )

        collection = self.get_collection(collection_name)
        if multi:
            result = collection.update_many(mapped_query, mapped_update, upsert=upsert)
        else:
            result = collection.update_one(mapped_query, mapped_update, upsert=upsert)
        return UpdateResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=result.upserted_id,
        )

    def do_remove(self, collection_name: str, query: Query, domain_type: type) -> DeleteResult:
        """Delete every match with a single bulk delete."""
        metadata = metadata_for(domain_type)
        mapped_query = metadata.query_to_stored(query.query_document())
        logger.debug("Remove using query: %s in collection: %s", mapped_query, collection_name)

        self._publish(MappingEventType.BEFORE_DELETE, domain_type, collection_name, mapped_query)
        result = self.get_collection(collection_name).delete_many(mapped_query)
        self._publish(MappingEventType.AFTER_DELETE, domain_type, collection_name, mapped_query)
        return DeleteResult(deleted_count=result.deleted_count)

    def do_find_and_delete(
        self, collection_name: str, query: Query, domain_type: type[T]
    ) -> list[T]:
        """Read every match, then delete them one by one.

        Not atomic: each document is removed with its own delete and its own
        pair of delete events.
        """
        metadata = metadata_for(domain_type)
        mapped_query = metadata.query_to_stored(query.query_document())
        mapped_fields = metadata.fields_to_stored(query.fields_document())
        # ids are needed for the per-document deletes
        mapped_fields.pop(ID_FIELD, None)
        logger.debug(
            "Find and delete using query: %s in collection: %s", mapped_query, collection_name
        )

        collection = self.get_collection(collection_name)
        cursor = collection.find(mapped_query, projection=mapped_fields or None)
        documents = list(self._prepare(cursor, metadata, CursorOptions.from_query(query)))
        entities = [
            self._read(domain_type, document, domain_type, collection_name)
            for document in documents
        ]

        for document in documents:
            self._delete_document(collection_name, domain_type, document[ID_FIELD])
        return entities

    def find_and_modify(
        self,
        query: Query,
        update: Update | None,
        options: FindAndModifyOptions | None,
        domain_type: type[T],
        collection_name: str | None = None,
    ) -> T | None:
        """Atomically update (or remove) the first match and return it.

        Returns the document as it was before the change unless
        ``options.return_new`` is set.
        """
        options = options or FindAndModifyOptions()
        collection_name = self._resolve(domain_type, collection_name)
        metadata = metadata_for(domain_type)
        mapped_query = metadata.query_to_stored(query.query_document())
        mapped_fields = metadata.fields_to_stored(query.fields_document()) or None
        sort = _sort_spec(metadata, query.sort) or None
        collection = self.get_collection(collection_name)

        if options.remove:
            logger.debug(
                "findAndRemove using query: %s in collection: %s", mapped_query, collection_name
            )
            document = collection.find_one_and_delete(
                mapped_query, projection=mapped_fields, sort=sort
            )
        else:
            update = not_none(update, "Update must not be None")
            mapped_update = metadata.update_to_stored(update.to_document())
            logger.debug(
                "findAndModify using query: %s fields: %s update: %s in collection: %s",
                mapped_query,
                mapped_fields,
                mapped_update,
                collection_name,
            )
            document = collection.find_one_and_update(
                mapped_query,
                mapped_update,
                projection=mapped_fields,
                sort=sort,
                upsert=options.upsert,
                return_document=(
                    ReturnDocument.AFTER if options.return_new else ReturnDocument.BEFORE
                ),
            )

        if document is None:
            return None
        return self._read(domain_type, document, domain_type, collection_name)

    # --- Convenience operations ---

    def save(self, entity: T, collection_name: str | None = None) -> T:
        """Insert ``entity`` or replace the stored document with the same id.

        Returns the entity as stored, with its id populated.
        """
        not_none(entity, "Entity must not be None")
        domain_type = type(entity)
        collection_name = self._resolve(domain_type, collection_name)
        mapper = self._mapper(domain_type)
        document = mapper.write(entity)

        self._publish(MappingEventType.BEFORE_SAVE, domain_type, collection_name, document)
        collection = self.get_collection(collection_name)
        if ID_FIELD in document:
            logger.debug(
                "Saving document with id %r in collection: %s", document[ID_FIELD], collection_name
            )
            collection.replace_one({ID_FIELD: document[ID_FIELD]}, document, upsert=True)
        else:
            logger.debug("Inserting new document in collection: %s", collection_name)
            document[ID_FIELD] = collection.insert_one(document).inserted_id
        self._publish(MappingEventType.AFTER_SAVE, domain_type, collection_name, document)
        return mapper.read(document)

    def insert(self, entity: T, collection_name: str | None = None) -> T:
        """Insert ``entity``. An existing id raises the driver's DuplicateKeyError."""
        not_none(entity, "Entity must not be None")
        domain_type = type(entity)
        collection_name = self._resolve(domain_type, collection_name)
        mapper = self._mapper(domain_type)
        document = mapper.write(entity)

        self._publish(MappingEventType.BEFORE_SAVE, domain_type, collection_name, document)
        logger.debug("Inserting document in collection: %s", collection_name)
        collection = self.get_collection(collection_name)
        document[ID_FIELD] = collection.insert_one(document).inserted_id
        self._publish(MappingEventType.AFTER_SAVE, domain_type, collection_name, document)
        return mapper.read(document)

    def find(
        self, query: Query, domain_type: type[T], collection_name: str | None = None
    ) -> list[T]:
        not_none(query, "Query must not be None")
        return self.do_find(
            self._resolve(domain_type, collection_name),
            query.query_document(),
            query.fields_document(),
            domain_type,
            domain_type,
            CursorOptions.from_query(query),
        )

    def find_one(
        self, query: Query, domain_type: type[T], collection_name: str | None = None
    ) -> T | None:
        not_none(query, "Query must not be None")
        results = self.do_find(
            self._resolve(domain_type, collection_name),
            query.query_document(),
            query.fields_document(),
            domain_type,
            domain_type,
            CursorOptions.from_query(query).with_limit(1),
        )
        return results[0] if results else None

    def find_by_id(
        self, id: Any, domain_type: type[T], collection_name: str | None = None  # noqa: A002
    ) -> T | None:
        not_none(id, "Id must not be None")
        results = self.do_find(
            self._resolve(domain_type, collection_name),
            {ID_FIELD: id},
            {},
            domain_type,
            domain_type,
            CursorOptions(limit=1),
        )
        return results[0] if results else None

    def count(self, query: Query, domain_type: type, collection_name: str | None = None) -> int:
        not_none(query, "Query must not be None")
        collection_name = self._resolve(domain_type, collection_name)
        mapped_query = metadata_for(domain_type).query_to_stored(query.query_document())
        logger.debug("Executing count: %s in collection: %s", mapped_query, collection_name)
        return self.get_collection(collection_name).count_documents(mapped_query)

    def exists(self, query: Query, domain_type: type, collection_name: str | None = None) -> bool:
        return self.find_one(query, domain_type, collection_name) is not None

    def remove_entity(self, entity: Any, collection_name: str | None = None) -> DeleteResult:
        """Delete the stored document with the id of ``entity``."""
        not_none(entity, "Entity must not be None")
        domain_type = type(entity)
        id_value = not_none(
            self._mapper(domain_type).id_of(entity),
            f"Cannot remove {domain_type.__name__} without an id",
        )
        return self._delete_document(
            self._resolve(domain_type, collection_name), domain_type, id_value
        )

    def _delete_document(
        self, collection_name: str, domain_type: type, id_value: Any
    ) -> DeleteResult:
        id_query = metadata_for(domain_type).query_to_stored({ID_FIELD: id_value})
        self._publish(MappingEventType.BEFORE_DELETE, domain_type, collection_name, id_query)
        logger.debug("Remove using query: %s in collection: %s", id_query, collection_name)
        result = self.get_collection(collection_name).delete_one(id_query)
        self._publish(MappingEventType.AFTER_DELETE, domain_type, collection_name, id_query)
        return DeleteResult(deleted_count=result.deleted_count)

    # --- Collections ---

    def _collection_name_of(self, name_or_type: str | type) -> str:
        if isinstance(name_or_type, type):
            return self.determine_collection_name(name_or_type)
        return has_text(name_or_type, "Collection name must not be None nor empty")

    def collection_exists(self, name_or_type: str | type) -> bool:
        return self._collection_name_of(name_or_type) in self._database.list_collection_names()

    def drop_collection(self, name_or_type: str | type) -> None:
        collection_name = self._collection_name_of(name_or_type)
        logger.debug("Dropping collection: %s", collection_name)
        self._database.drop_collection(collection_name)
