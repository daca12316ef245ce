"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager owns a lazily created pymongo client; pooling is left to
the driver.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for MongoDB connections."""

    uri: str = "mongodb://localhost:27017"
    database: str
    app_name: str | None = None
    server_selection_timeout_ms: int = 30000
    max_pool_size: int = 100
    extra: dict[str, Any] = {}

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``pymongo.MongoClient``."""
        kwargs: dict[str, Any] = {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "maxPoolSize": self.max_pool_size,
        }
        if self.app_name is not None:
            kwargs["appname"] = self.app_name
        kwargs.update(self.extra)
        return kwargs


class ConnectionManager:
    """Owns the MongoClient for one ConnectionConfig."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._client: MongoClient | None = None

    @property
    def client(self) -> MongoClient:
        """The client, created on first access."""
        if self._client is None:
            logger.info("Creating MongoClient for database '%s'", self.config.database)
            self._client = MongoClient(self.config.uri, **self.config.client_kwargs())
        return self._client

    def get_database(self) -> Database:
        """Return the configured database."""
        return self.client[self.config.database]

    def close(self) -> None:
        """Close the client. A later access creates a new one."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Closed MongoClient for database '%s'", self.config.database)
