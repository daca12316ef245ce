"""Shared test fixtures."""

from __future__ import annotations

import mongomock
import pytest
from pymongo.database import Database

from doc_query.core.connection import ConnectionConfig
from doc_query.core.template import MongoTemplate


@pytest.fixture
def mongo_config() -> ConnectionConfig:
    """Connection config pointing at a host that is never contacted."""
    return ConnectionConfig(uri="mongodb://db:27017", database="app")


@pytest.fixture
def database() -> Database:
    """Fresh in-memory MongoDB database."""
    return mongomock.MongoClient()["doc_query_tests"]


@pytest.fixture
def template(database: Database) -> MongoTemplate:
    """MongoTemplate over the in-memory database."""
    return MongoTemplate(database)
