"""Integration tests for MongoTemplate convenience operations and Repository."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from bson import ObjectId
from pydantic import BaseModel, Field
from pymongo.database import Database

from doc_query.core.enums import MappingEventType
from doc_query.core.events import MappingEvent
from doc_query.core.exceptions import FieldMismatchError, InvalidArgumentError
from doc_query.core.query import Update, query
from doc_query.core.template import MongoTemplate
from doc_query.repository.base import Repository

# --- Test models ---


@dataclass
class Person:
    id: str | None
    firstname: str
    age: int = 0


class Droid(BaseModel):
    id: str | None = None
    designation: str = Field(alias="model")


# --- Tests ---


@pytest.mark.integration
class TestTemplateWrites:
    def test_save_without_id_generates_one(self, template: MongoTemplate) -> None:
        saved = template.save(Person(id=None, firstname="leia"))
        assert saved.id is not None
        assert template.find_by_id(saved.id, Person) == saved

    def test_save_replaces_existing_document(self, template: MongoTemplate) -> None:
        template.save(Person(id="id-1", firstname="han"))
        template.save(Person(id="id-1", firstname="Han", age=32))
        assert template.find(query(), Person) == [Person(id="id-1", firstname="Han", age=32)]

    def test_insert(self, template: MongoTemplate) -> None:
        inserted = template.insert(Person(id="id-1", firstname="han"))
        assert inserted == Person(id="id-1", firstname="han")
        assert template.count(query(), Person) == 1

    def test_save_pydantic_model_uses_alias(
        self, template: MongoTemplate, database: Database
    ) -> None:
        template.save(Droid(id="r2", model="astromech"))
        assert database["droid"].find_one({"_id": "r2"}) == {"_id": "r2", "model": "astromech"}
        found = template.query(Droid).find_by(query(designation="astromech"))
        assert found is not None and found.id == "r2"

    def test_save_pydantic_model_without_id_reads_generated_id(
        self, template: MongoTemplate, database: Database
    ) -> None:
        saved = template.save(Droid(model="astromech"))

        stored = database["droid"].find_one({"model": "astromech"})
        assert isinstance(stored["_id"], ObjectId)
        assert saved.id == str(stored["_id"])
        assert template.find_by_id(saved.id, Droid) == saved
        assert template.query(Droid).find_all() == [saved]

    def test_resave_with_generated_id_replaces_document(self, template: MongoTemplate) -> None:
        saved = template.save(Droid(model="astromech"))
        template.save(Droid(id=saved.id, model="protocol"))

        assert template.count(query(), Droid) == 1
        assert template.find_by_id(saved.id, Droid) == Droid(id=saved.id, model="protocol")
        assert template.remove_entity(saved).deleted_count == 1

    def test_upsert_then_find_reads_generated_id(self, template: MongoTemplate) -> None:
        result = (
            template.update(Droid)
            .apply(Update().set("designation", "protocol"))
            .upsert_if_none_matching(query(designation="protocol"))
        )

        assert result.upserted_id is not None
        assert template.query(Droid).find_all() == [
            Droid(id=str(result.upserted_id), model="protocol")
        ]

    def test_save_publishes_events(self, template: MongoTemplate) -> None:
        events: list[MappingEvent] = []
        template.add_listener(events.append)
        template.save(Person(id="id-1", firstname="han"))
        assert [e.type for e in events] == [
            MappingEventType.BEFORE_SAVE,
            MappingEventType.AFTER_SAVE,
        ]
        assert events[1].collection == "person"

    def test_remove_entity(self, template: MongoTemplate) -> None:
        han = template.save(Person(id="id-1", firstname="han"))
        assert template.remove_entity(han).deleted_count == 1
        assert template.exists(query(id="id-1"), Person) is False

    def test_remove_entity_requires_id(self, template: MongoTemplate) -> None:
        with pytest.raises(InvalidArgumentError, match="without an id"):
            template.remove_entity(Person(id=None, firstname="han"))


@pytest.mark.integration
class TestTemplateReads:
    @pytest.fixture(autouse=True)
    def _people(self, template: MongoTemplate) -> None:
        for i, name in enumerate(["han", "luke", "leia"], start=1):
            template.save(Person(id=f"id-{i}", firstname=name, age=20 + i))

    def test_find_with_cursor_options(self, template: MongoTemplate) -> None:
        result = template.find(query({"age": {"$gt": 20}}).order_by("age").skipping(1), Person)
        assert [p.firstname for p in result] == ["luke", "leia"]

    def test_find_one(self, template: MongoTemplate) -> None:
        assert template.find_one(query(firstname="leia"), Person) == Person(
            id="id-3", firstname="leia", age=23
        )
        assert template.find_one(query(firstname="vader"), Person) is None

    def test_find_with_partial_fields_missing_required_raises(
        self, template: MongoTemplate
    ) -> None:
        with pytest.raises(FieldMismatchError):
            template.find(query(firstname="han").include("age"), Person)

    def test_count_and_exists(self, template: MongoTemplate) -> None:
        assert template.count(query({"age": {"$gte": 22}}), Person) == 2
        assert template.exists(query(firstname="luke"), Person)

    def test_raw_documents(self, template: MongoTemplate) -> None:
        documents = template.query(Person).return_results_as(dict).find_all_by(query(id="id-2"))
        assert documents == [{"_id": "id-2", "firstname": "luke", "age": 22}]

    def test_find_publishes_after_load(self, template: MongoTemplate) -> None:
        events: list[MappingEvent] = []
        template.add_listener(events.append, MappingEventType.AFTER_LOAD)
        template.query(Person).find_all()
        assert len(events) == 3

    def test_drop_collection(self, template: MongoTemplate) -> None:
        assert template.collection_exists(Person)
        template.drop_collection(Person)
        assert not template.collection_exists("person")


@pytest.mark.integration
class TestRepository:
    class PersonRepository(Repository[Person]):
        def adults(self) -> list[Person]:
            return self.query().find_all_by(query({"age": {"$gte": 18}}))

    def test_repository_round_trip(self, template: MongoTemplate) -> None:
        repo = self.PersonRepository(template, Person, collection="people")
        repo.save(Person(id="id-1", firstname="han", age=32))
        repo.save(Person(id="id-2", firstname="ben", age=9))

        assert [p.firstname for p in repo.adults()] == ["han"]
        assert repo.count() == 2

        repo.update().apply(Update().inc("age")).all()
        assert repo.find_by_id("id-2") == Person(id="id-2", firstname="ben", age=10)

        removed = repo.remove().and_return_all_matching(query(firstname="ben"))
        assert [p.id for p in removed] == ["id-2"]
        assert repo.find_all() == [Person(id="id-1", firstname="han", age=33)]
        assert template.count(query(), Person) == 0
