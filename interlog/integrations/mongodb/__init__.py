"""MongoDB integration for interlog.

This module provides a MongoDB implementation of the DocumentBackend
interface using the PyMongo driver. Commits rely on multi-document
transactions and therefore need a replica set or a sharded cluster.

Installation:
    pip install interlog[mongodb]

Usage:
    >>> from interlog import DocumentEventStorage
    >>> from interlog.integrations.mongodb import (
    ...     MongoDBConfig,
    ...     MongoDBConnectionManager,
    ...     MongoDocumentBackend,
    ... )
    >>>
    >>> config = MongoDBConfig(
    ...     uri="mongodb://localhost:27017/?replicaSet=rs0",
    ...     database="myapp"
    ... )
    >>> manager = MongoDBConnectionManager(config)
    >>> storage = DocumentEventStorage(MongoDocumentBackend(manager))
    >>> storage.setup()
"""

from .backend import MongoDocumentBackend, MongoDocumentTransaction, to_mongo_filter
from .config import MongoDBConfig
from .connection import MongoDBConnectionManager

__all__ = [
    "MongoDBConfig",
    "MongoDBConnectionManager",
    "MongoDocumentBackend",
    "MongoDocumentTransaction",
    "to_mongo_filter",
]
