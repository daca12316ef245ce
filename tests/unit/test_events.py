"""Unit tests for EventPublisher."""

from __future__ import annotations

import pytest

from doc_query.core.enums import MappingEventType
from doc_query.core.events import EventPublisher, MappingEvent


def _event(event_type: MappingEventType) -> MappingEvent:
    return MappingEvent(event_type, dict, "people", {"_id": 1})


class TestEventPublisher:
    def test_listener_receives_all_events_by_default(self) -> None:
        received: list[MappingEvent] = []
        publisher = EventPublisher()
        publisher.add_listener(received.append)

        publisher.publish(_event(MappingEventType.BEFORE_DELETE))
        publisher.publish(_event(MappingEventType.AFTER_SAVE))

        assert [e.type for e in received] == [
            MappingEventType.BEFORE_DELETE,
            MappingEventType.AFTER_SAVE,
        ]

    def test_listener_filtered_by_type(self) -> None:
        received: list[MappingEvent] = []
        publisher = EventPublisher()
        publisher.add_listener(received.append, MappingEventType.AFTER_DELETE)

        publisher.publish(_event(MappingEventType.BEFORE_DELETE))
        publisher.publish(_event(MappingEventType.AFTER_DELETE))

        assert len(received) == 1
        assert received[0].type is MappingEventType.AFTER_DELETE

    def test_remove_listener(self) -> None:
        received: list[MappingEvent] = []
        publisher = EventPublisher()
        publisher.add_listener(received.append)
        publisher.remove_listener(received.append)

        publisher.publish(_event(MappingEventType.AFTER_LOAD))

        assert received == []

    def test_listener_errors_propagate(self) -> None:
        def failing(event: MappingEvent) -> None:
            raise RuntimeError("listener failed")

        publisher = EventPublisher()
        publisher.add_listener(failing)

        with pytest.raises(RuntimeError, match="listener failed"):
            publisher.publish(_event(MappingEventType.BEFORE_SAVE))
