"""Unit tests for Query, Update and option value objects."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from doc_query.core.enums import Direction
from doc_query.core.exceptions import InvalidArgumentError
from doc_query.core.options import CursorOptions, FindAndModifyOptions
from doc_query.core.query import Query, Update, query


class TestQuery:
    def test_empty_query_matches_everything(self) -> None:
        assert query().query_document() == {}
        assert query().fields_document() == {}

    def test_criteria_and_keywords_merge(self) -> None:
        q = query({"age": {"$gte": 18}}, firstname="luke")
        assert q.query_document() == {"age": {"$gte": 18}, "firstname": "luke"}

    def test_refinements_return_new_query(self) -> None:
        base = query(firstname="luke")
        refined = (
            base.include("firstname").order_by("age", Direction.DESC).skipping(5).limited_to(10)
        )

        assert base == query(firstname="luke")
        assert refined.fields == {"firstname": 1}
        assert refined.sort == (("age", Direction.DESC),)
        assert refined.skip == 5
        assert refined.limit == 10

    def test_matching_adds_criteria(self) -> None:
        assert query(a=1).matching(b=2).criteria == {"a": 1, "b": 2}

    def test_exclude(self) -> None:
        assert query().exclude("secret").fields_document() == {"secret": 0}

    def test_documents_are_copies(self) -> None:
        q = query(firstname="luke")
        q.query_document()["firstname"] = "leia"
        assert q.criteria == {"firstname": "luke"}

    def test_query_is_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            Query().limit = 3  # type: ignore[misc]

    @pytest.mark.parametrize("method", ["skipping", "limited_to"])
    def test_negative_counts_rejected(self, method: str) -> None:
        with pytest.raises(InvalidArgumentError):
            getattr(query(), method)(-1)


class TestUpdate:
    def test_operators_render_to_document(self) -> None:
        update = (
            Update()
            .set("firstname", "Han")
            .unset("nickname")
            .inc("visits")
            .push("tags", "smuggler")
            .set_on_insert("created", 1)
            .current_date("modified")
        )
        assert update.to_document() == {
            "$set": {"firstname": "Han"},
            "$unset": {"nickname": 1},
            "$inc": {"visits": 1},
            "$push": {"tags": "smuggler"},
            "$setOnInsert": {"created": 1},
            "$currentDate": {"modified": True},
        }

    def test_update_does_not_mutate(self) -> None:
        base = Update().set("a", 1)
        base.set("b", 2)
        assert base.to_document() == {"$set": {"a": 1}}

    def test_from_document(self) -> None:
        update = Update.from_document({"$set": {"a": 1}})
        assert update == Update().set("a", 1)

    def test_from_document_rejects_replacement_documents(self) -> None:
        with pytest.raises(InvalidArgumentError, match="operators"):
            Update.from_document({"a": 1})


class TestOptions:
    def test_find_and_modify_defaults(self) -> None:
        options = FindAndModifyOptions()
        assert options.return_new is False
        assert options.upsert is False
        assert options.remove is False

    def test_cursor_options_from_query(self) -> None:
        q = query().order_by("name").skipping(2).limited_to(3)
        assert CursorOptions.from_query(q) == CursorOptions(
            sort=(("name", Direction.ASC),), skip=2, limit=3
        )

    def test_cursor_options_from_missing_query(self) -> None:
        assert CursorOptions.from_query(None) == CursorOptions()

    def test_with_limit_overrides(self) -> None:
        options = CursorOptions(skip=1, limit=50).with_limit(2)
        assert options == CursorOptions(skip=1, limit=2)
