"""Pytest fixtures for MongoDB integration tests."""

from collections.abc import Iterator

import pytest

from interlog import DocumentEventStorage
from interlog.integrations.mongodb import (
    MongoDBConfig,
    MongoDBConnectionManager,
    MongoDocumentBackend,
)

# Assumes a single-node replica set is running locally on port 27017
LOCAL_MONGO_URI = "mongodb://localhost:27017/?replicaSet=rs0&directConnection=true"


@pytest.fixture
def mongo_config(request: pytest.FixtureRequest) -> MongoDBConfig:
    """Create a MongoDBConfig with a database named after the test."""
    return MongoDBConfig(
        uri=LOCAL_MONGO_URI,
        database=f"test_{request.node.name}"[:63],
        server_selection_timeout_ms=2000,
    )


@pytest.fixture
def connection_manager(mongo_config: MongoDBConfig) -> Iterator[MongoDBConnectionManager]:
    """Connect to the local replica set and drop the test database around the test."""
    with MongoDBConnectionManager(mongo_config) as manager:
        if not manager.verify_connectivity():
            pytest.skip("MongoDB replica set is not reachable")
        manager.client.drop_database(mongo_config.database)
        try:
            yield manager
        finally:
            manager.client.drop_database(mongo_config.database)


@pytest.fixture
def mongo_backend(connection_manager: MongoDBConnectionManager) -> MongoDocumentBackend:
    return MongoDocumentBackend(connection_manager)


@pytest.fixture
def mongo_storage(mongo_backend: MongoDocumentBackend) -> DocumentEventStorage:
    """Create an event storage with its indexes in place."""
    storage = DocumentEventStorage(mongo_backend, batch_size=2)
    storage.setup()
    return storage
