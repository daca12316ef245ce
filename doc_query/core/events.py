"""Lifecycle events published by the template.

Listeners are plain callables. They run synchronously in the caller's
thread, and anything they raise propagates to the operation that
published the event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from doc_query.core.enums import MappingEventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingEvent:
    """A single lifecycle notification.

    ``source`` is the document the event concerns. Deletes carry the query
    document: the bulk filter, or ``{"_id": id}`` for a single document.
    """

    type: MappingEventType
    domain_type: type
    collection: str
    source: Any


Listener = Callable[[MappingEvent], None]


class EventPublisher:
    """Keeps registered listeners and fans events out to them."""

    def __init__(self) -> None:
        self._listeners: list[tuple[Listener, frozenset[MappingEventType]]] = []

    def add_listener(self, listener: Listener, *types: MappingEventType) -> None:
        """Register ``listener`` for ``types``, or for every event if none given."""
        self._listeners.append((listener, frozenset(types)))

    def remove_listener(self, listener: Listener) -> None:
        self._listeners = [(fn, types) for fn, types in self._listeners if fn != listener]

    def publish(self, event: MappingEvent) -> None:
        for listener, types in self._listeners:
            if not types or event.type in types:
                listener(event)
        logger.debug(
            "Published %s for %s in '%s'",
            event.type.value,
            event.domain_type.__name__,
            event.collection,
        )
